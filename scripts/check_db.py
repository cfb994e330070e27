# scripts/check_db.py
# Проверяет подключение к DATABASE_URL и наличие таблиц магазина
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from cartshop.core.config import settings
from cartshop.db.session import make_engine

EXPECTED_TABLES = {"users", "products", "cart_items", "orders", "order_items"}


def main():
    url = settings.DATABASE_URL
    print('Trying to connect to:', url)
    engine = make_engine(url)
    try:
        with engine.connect() as conn:
            print('Connection OK, SELECT 1 ->', conn.execute(text("SELECT 1")).scalar())
            missing = EXPECTED_TABLES - set(inspect(conn).get_table_names())
            if missing:
                print('Missing tables:', ', '.join(sorted(missing)))
            else:
                print('All tables present')
    except SQLAlchemyError as e:
        print('Connection failed:', e)
    finally:
        engine.dispose()


if __name__ == '__main__':
    main()
