# vgen/services/local_services.py
"""
Local service finder (demo data).

No provider database is connected; search and nearby results are generated
from the query so the frontend has realistic shapes to render.
"""
import random
import datetime as dt
from typing import Optional

DEMO_NOTE = "This is a demo implementation. In production, this would connect to real service provider databases."

CATEGORIES = [
    {
        "id": "healthcare",
        "name": "Healthcare",
        "icon": "🏥",
        "description": "Medical services and healthcare providers",
        "subcategories": ["Primary Care", "Specialists", "Dentists", "Mental Health", "Pharmacies", "Urgent Care", "Hospitals"],
    },
    {
        "id": "education",
        "name": "Education",
        "icon": "🎓",
        "description": "Educational institutions and services",
        "subcategories": ["Schools", "Tutoring", "Test Prep", "Language Learning", "Professional Development", "Libraries", "Online Courses"],
    },
    {
        "id": "home-services",
        "name": "Home Services",
        "icon": "🏠",
        "description": "Home maintenance and improvement services",
        "subcategories": ["Plumbing", "Electrical", "Cleaning", "Landscaping", "Painting", "Handyman", "Moving"],
    },
    {
        "id": "automotive",
        "name": "Automotive",
        "icon": "🚗",
        "description": "Car repair and maintenance services",
        "subcategories": ["Auto Repair", "Body Shops", "Car Wash", "Tire Services", "Oil Change", "Dealerships", "Parts"],
    },
    {
        "id": "beauty-wellness",
        "name": "Beauty & Wellness",
        "icon": "💆",
        "description": "Beauty and personal care services",
        "subcategories": ["Hair Salons", "Spas", "Nail Salons", "Massage", "Fitness Centers", "Yoga Studios", "Personal Training"],
    },
    {
        "id": "food-dining",
        "name": "Food & Dining",
        "icon": "🍽️",
        "description": "Restaurants and food services",
        "subcategories": ["Restaurants", "Fast Food", "Cafes", "Bakeries", "Delivery", "Catering", "Food Trucks"],
    },
    {
        "id": "professional",
        "name": "Professional Services",
        "icon": "💼",
        "description": "Business and professional services",
        "subcategories": ["Legal Services", "Accounting", "Real Estate", "Insurance", "Financial Planning", "Consulting", "Marketing"],
    },
    {
        "id": "shopping",
        "name": "Shopping",
        "icon": "🛍️",
        "description": "Retail and shopping services",
        "subcategories": ["Grocery Stores", "Clothing Stores", "Electronics", "Home Goods", "Bookstores", "Specialty Shops", "Online Retail"],
    },
]

FEATURED = [
    {
        "id": "service_1",
        "name": "Downtown Medical Center",
        "category": "Healthcare",
        "subcategory": "Primary Care",
        "rating": 4.8,
        "reviewCount": 156,
        "priceRange": "$$",
        "distance": 1.2,
        "location": "Downtown Area",
        "description": "Comprehensive primary healthcare services with experienced physicians.",
        "features": ["Same-day appointments", "Online booking", "Most insurance accepted"],
        "phone": "(555) 123-4567",
        "website": "https://medical-center.demo",
        "hours": "Mon-Fri: 8AM-6PM, Sat: 9AM-2PM",
        "verified": True,
    },
    {
        "id": "service_2",
        "name": "Elite Fitness Studio",
        "category": "Beauty & Wellness",
        "subcategory": "Fitness Centers",
        "rating": 4.6,
        "reviewCount": 89,
        "priceRange": "$$$",
        "distance": 0.8,
        "location": "Business District",
        "description": "Premium fitness facility with personal training and group classes.",
        "features": ["Personal training", "Group classes", "Modern equipment"],
        "phone": "(555) 987-6543",
        "website": "https://elite-fitness.demo",
        "hours": "Mon-Fri: 5AM-10PM, Sat-Sun: 7AM-8PM",
        "verified": True,
    },
    {
        "id": "service_3",
        "name": "Bella Vista Restaurant",
        "category": "Food & Dining",
        "subcategory": "Restaurants",
        "rating": 4.4,
        "reviewCount": 203,
        "priceRange": "$$$",
        "distance": 2.1,
        "location": "Arts Quarter",
        "description": "Upscale Italian dining with authentic cuisine and extensive wine list.",
        "features": ["Fine dining", "Wine tasting", "Private events"],
        "phone": "(555) 456-7890",
        "website": "https://bella-vista.demo",
        "hours": "Tue-Sun: 5PM-11PM, Closed Mondays",
        "verified": True,
    },
]

_WEEKDAY_HOURS = "8:00 AM - 6:00 PM"


def service_detail(service_id: str) -> dict:
    """Detail record for any id (always the same demo provider)."""
    return {
        "id": service_id,
        "name": "Downtown Medical Center",
        "category": "Healthcare",
        "subcategory": "Primary Care",
        "rating": 4.8,
        "reviewCount": 156,
        "priceRange": "$$",
        "distance": 1.2,
        "location": {
            "address": "123 Main Street, Downtown",
            "city": "Metropolis",
            "state": "CA",
            "zipCode": "12345",
            "coordinates": {"lat": 34.0522, "lng": -118.2437},
        },
        "contact": {
            "phone": "(555) 123-4567",
            "email": "info@medical-center.demo",
            "website": "https://medical-center.demo",
        },
        "hours": [
            *({"day": day, "hours": _WEEKDAY_HOURS} for day in ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")),
            {"day": "Saturday", "hours": "9:00 AM - 2:00 PM"},
            {"day": "Sunday", "hours": "Closed"},
        ],
        "description": "Comprehensive primary healthcare services with experienced physicians and modern facilities.",
        "features": [
            "Same-day appointments",
            "Online booking",
            "Most insurance accepted",
            "Telemedicine available",
            "Lab services on-site",
            "Pharmacy partnership",
        ],
        "providers": [
            {
                "name": "Dr. Sarah Johnson",
                "specialty": "Family Medicine",
                "education": "MD from UCLA Medical School",
                "experience": "15+ years",
                "languages": ["English", "Spanish"],
            },
            {
                "name": "Dr. Michael Chen",
                "specialty": "Internal Medicine",
                "education": "MD from Stanford Medical School",
                "experience": "12+ years",
                "languages": ["English", "Mandarin"],
            },
        ],
        "reviews": [
            {
                "id": "review_1",
                "userName": "Jennifer L.",
                "rating": 5,
                "date": "2024-01-15",
                "comment": "Excellent care and very professional staff. Highly recommended!",
            },
            {
                "id": "review_2",
                "userName": "Robert M.",
                "rating": 5,
                "date": "2024-01-10",
                "comment": "Great experience. The doctors are knowledgeable and caring.",
            },
        ],
        "insurance": ["Blue Cross Blue Shield", "Aetna", "Cigna", "United Healthcare", "Medicare", "Medi-Cal"],
        "photos": [
            "https://images.unsplash.com/photo-1559757148-5c350d0d3c56?w=400",
            "https://images.unsplash.com/photo-1559757175-0eb30cd8c063?w=400",
            "https://images.unsplash.com/photo-1581056771107-24ca5f033842?w=400",
        ],
        "verified": True,
        "lastUpdated": dt.datetime.now(dt.timezone.utc).isoformat(),
    }


def search_services(
    location: str,
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
    radius: int = 10,
    rating: Optional[float] = None,
    price_range: Optional[str] = None,
    rng: random.Random | None = None,
) -> dict:
    """
    Three demo providers shaped by the query.

    Returns:
        {"services": [...], "centerLocation": "<location>, CA", "totalFound": 3}
    """
    rng = rng or random
    kind = category.lower() if category else None
    services = [
        {
            "id": "service_1",
            "name": f"Best {category or 'Medical'} Center",
            "category": category or "Healthcare",
            "subcategory": subcategory or "Primary Care",
            "rating": rating or 4.5,
            "reviewCount": rng.randint(10, 209),
            "priceRange": price_range or "$$",
            "distance": rng.random() * radius,
            "location": f"{location} Area",
            "description": f"Professional {kind or 'medical'} services in {location}.",
            "features": ["Experienced staff", "Modern facilities", "Convenient location"],
            "phone": "(555) 123-4567",
            "verified": True,
        },
        {
            "id": "service_2",
            "name": f"Elite {category or 'Dental'} Services",
            "category": category or "Healthcare",
            "subcategory": subcategory or "Dentists",
            "rating": rating or 4.7,
            "reviewCount": rng.randint(20, 169),
            "priceRange": price_range or "$$$",
            "distance": rng.random() * radius,
            "location": f"Downtown {location}",
            "description": f"Premium {kind or 'dental'} care with state-of-the-art equipment.",
            "features": ["Advanced technology", "Comfortable environment", "Insurance accepted"],
            "phone": "(555) 987-6543",
            "verified": True,
        },
        {
            "id": "service_3",
            "name": f"{location} Family Clinic",
            "category": category or "Healthcare",
            "subcategory": subcategory or "Urgent Care",
            "rating": rating or 4.3,
            "reviewCount": rng.randint(30, 129),
            "priceRange": price_range or "$",
            "distance": rng.random() * radius,
            "location": f"North {location}",
            "description": f"Affordable healthcare services for families in {location}.",
            "features": ["Family-friendly", "Affordable rates", "Walk-ins welcome"],
            "phone": "(555) 456-7890",
            "verified": True,
        },
    ]
    return {"services": services, "centerLocation": f"{location}, CA", "totalFound": len(services)}


def nearby_services(
    latitude: float,
    longitude: float,
    radius: int = 5,
    category: Optional[str] = None,
    limit: int = 20,
    rng: random.Random | None = None,
) -> list[dict]:
    """`limit` generated providers scattered within ~0.005 degrees of the point."""
    rng = rng or random
    services = []
    for i in range(1, limit + 1):
        services.append({
            "id": f"nearby_service_{i}",
            "name": f"Local Service Provider {i}",
            "category": category or "General",
            "subcategory": "Various",
            "rating": 4.0 + rng.random(),
            "reviewCount": rng.randint(5, 104),
            "priceRange": rng.choice(["$", "$$", "$$$"]),
            "distance": rng.random() * radius,
            "location": {
                "address": f"{rng.randint(0, 9998)} Main Street",
                "city": "Nearby City",
                "coordinates": {
                    "lat": latitude + (rng.random() - 0.5) * 0.01,
                    "lng": longitude + (rng.random() - 0.5) * 0.01,
                },
            },
            "description": "Local service provider offering quality services.",
            "phone": "(555) 123-4567",
            "verified": rng.random() > 0.3,
        })
    return services
