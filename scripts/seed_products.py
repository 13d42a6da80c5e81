from decimal import Decimal
from storefront.core.database import SessionLocal
from storefront.models import Category, Product


SAMPLE_CATEGORIES = ["Coffee Beans", "Equipment"]

SAMPLE_PRODUCTS = [
    {
        "name": "Ethiopian Yirgacheffe",
        "category": "Coffee Beans",
        "price": Decimal("18.99"),
        "description": "Bright and floral with notes of citrus and berries.",
        "roast_level": "Light",
        "origin": "Ethiopia",
        "flavor_notes": ["Citrus", "Blueberry", "Jasmine"],
        "weight": "12 oz",
    },
    {
        "name": "Colombian Supremo",
        "category": "Coffee Beans",
        "price": Decimal("16.50"),
        "description": "Smooth and balanced with caramel sweetness.",
        "roast_level": "Medium",
        "origin": "Colombia",
        "flavor_notes": ["Caramel", "Nutty", "Chocolate"],
        "weight": "12 oz",
    },
    {
        "name": "Pour-Over Dripper",
        "category": "Equipment",
        "price": Decimal("24.00"),
        "description": "Ceramic dripper for a clean, even extraction.",
    },
]


def main():
    db = SessionLocal()
    try:
        categories = {}
        for name in SAMPLE_CATEGORIES:
            category = db.query(Category).filter(Category.name == name).first()
            if not category:
                category = Category(name=name)
                db.add(category)
                db.flush()
            categories[name] = category

        for item in SAMPLE_PRODUCTS:
            data = dict(item)
            category = categories[data.pop("category")]
            existing = db.query(Product).filter(Product.name == data["name"]).first()
            if not existing:
                db.add(Product(category_id=category.id, **data))
        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    main()
