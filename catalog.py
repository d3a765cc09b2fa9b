# Static product catalog shown on the storefront
PRODUCTS = [
    {
        "id": "1",
        "name": "Premium Wireless Headphones",
        "price": 299.99,
        "image": "https://images.unsplash.com/photo-1505740420928-5e560c06d30e?w=800&auto=format&fit=crop&q=60",
    },
    {
        "id": "2",
        "name": "Minimalist Smart Watch",
        "price": 199.99,
        "image": "https://images.unsplash.com/photo-1523275335684-37898b6baf30?w=800&auto=format&fit=crop&q=60",
    },
    {
        "id": "3",
        "name": "Pro Gaming Mouse",
        "price": 89.99,
        "image": "https://images.unsplash.com/photo-1527443224154-c4a3942d3acf?w=800&auto=format&fit=crop&q=60",
    },
    {
        "id": "4",
        "name": "Mechanical Keyboard",
        "price": 149.99,
        "image": "https://images.unsplash.com/photo-1511467687858-23d96c32e4ae?w=800&auto=format&fit=crop&q=60",
    },
    {
        "id": "5",
        "name": "Ultra-Wide Monitor",
        "price": 449.99,
        "image": "https://images.unsplash.com/photo-1527443154391-507e9dc6c5cc?w=800&auto=format&fit=crop&q=60",
    },
    {
        "id": "6",
        "name": "Noise Cancelling Earbuds",
        "price": 129.99,
        "image": "https://images.unsplash.com/photo-1590658268037-6bf12165a8df?w=800&auto=format&fit=crop&q=60",
    },
]
