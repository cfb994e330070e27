# scripts/seed_db.py
# Заполняет пустую БД тестовыми пользователями и товарами.
# Пароль у обоих пользователей: password123
from decimal import Decimal

from sqlalchemy import func, select

from cartshop.core.security import get_password_hash
from cartshop.db.base import Base
from cartshop.db.session import SessionLocal, engine
from cartshop.models.user import User, RoleEnum
from cartshop.models.product import Product
import cartshop.models.cart
import cartshop.models.order

USERS = [
    ("testuser", "test@example.com", RoleEnum.user),
    ("admin", "admin@example.com", RoleEnum.admin),
]

PRODUCTS = [
    ("Laptop - Dell XPS 13", "Ultra-portable 13-inch laptop with Intel i7 processor, 16GB RAM, 512GB SSD.", "1299.99", 15),
    ("Wireless Mouse", "Ergonomic wireless mouse with 6 buttons, adjustable DPI up to 3200.", "29.99", 50),
    ("Mechanical Keyboard", "RGB backlit mechanical keyboard with Cherry MX Blue switches.", "89.99", 30),
    ("USB-C Hub", "7-in-1 USB-C hub with HDMI, USB 3.0 ports, SD card reader and 100W power delivery.", "49.99", 25),
    ('Monitor - 27" 4K', "27-inch 4K UHD monitor with IPS panel and HDR400.", "399.99", 10),
    ("Webcam - 1080p", "Full HD webcam with auto-focus and noise-canceling microphone.", "69.99", 40),
    ("Laptop Stand", "Adjustable aluminum laptop stand, supports laptops up to 17 inches.", "39.99", 60),
    ("External SSD - 1TB", "Portable 1TB external SSD with USB 3.2 Gen 2.", "119.99", 35),
    ("Headphones - Noise Cancelling", "Over-ear noise-cancelling headphones with 30-hour battery life.", "199.99", 20),
    ("Phone Stand", "Adjustable phone stand with 360-degree rotation and non-slip base.", "14.99", 100),
]


def main():
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        if db.execute(select(func.count(Product.id))).scalar_one() > 0:
            print('Products already present, nothing to seed')
            return

        password_hash = get_password_hash("password123")
        for username, email, role in USERS:
            db.add(User(username=username, email=email, password_hash=password_hash, role=role.value))

        for name, description, price, stock in PRODUCTS:
            placeholder = "https://via.placeholder.com/400x300?text=" + name.replace(" ", "+")
            db.add(Product(
                name=name,
                description=description,
                price=Decimal(price),
                stock=stock,
                image_url=placeholder,
            ))
        db.commit()
        print(f'Seeded {len(USERS)} users and {len(PRODUCTS)} products')


if __name__ == '__main__':
    main()
