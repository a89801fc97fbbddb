"""Wipe the database and load sample users, stores and ratings."""
import logging

from database import SessionLocal, init_db
from models.users import User, UserRole
from models.store import Store
from models.rating import Rating
import models.log  # noqa: F401
from utils.hashing import get_password_hash

logger = logging.getLogger(__name__)

# (name, email, address, password, role)
SAMPLE_USERS = [
    ("System Administrator", "admin@store-rating.com", "123 Admin Street, Tech City, TC 12345", "Admin123!", UserRole.ADMIN),
    ("John Smith - Electronics Store Owner", "john.smith@electronics.com", "456 Tech Avenue, Silicon Valley, CA 94025", "Owner123!", UserRole.STORE_OWNER),
    ("Sarah Johnson - Fashion Boutique Owner", "sarah.johnson@fashion.com", "789 Fashion Boulevard, Style District, NY 10001", "Owner456!", UserRole.STORE_OWNER),
    ("Mike Wilson - Coffee Shop Owner", "mike.wilson@coffee.com", "321 Brew Street, Coffee Corner, WA 98101", "Owner789!", UserRole.STORE_OWNER),
    ("Alice Brown - Regular Customer", "alice.brown@email.com", "111 Customer Lane, Shopping District, TX 75001", "User123!", UserRole.NORMAL_USER),
    ("Bob Davis - Tech Enthusiast", "bob.davis@tech.com", "222 Tech Street, Innovation City, CA 90210", "User456!", UserRole.NORMAL_USER),
    ("Carol White - Fashion Lover", "carol.white@style.com", "333 Style Avenue, Fashion District, NY 10002", "User789!", UserRole.NORMAL_USER),
]

# (name, address, owner email)
SAMPLE_STORES = [
    ("TechMart Electronics", "456 Tech Avenue, Silicon Valley, CA 94025", "john.smith@electronics.com"),
    ("Elegant Fashion Boutique", "789 Fashion Boulevard, Style District, NY 10001", "sarah.johnson@fashion.com"),
    ("Brew & Bean Coffee Shop", "321 Brew Street, Coffee Corner, WA 98101", "mike.wilson@coffee.com"),
    ("Fresh Market Grocery", "555 Fresh Lane, Market District, TX 75002", "john.smith@electronics.com"),
]

# Store name -> values given by Alice, Bob and Carol
SAMPLE_RATINGS = {
    "TechMart Electronics": (5, 4, 5),
    "Elegant Fashion Boutique": (4, 3, 5),
    "Brew & Bean Coffee Shop": (5, 4, 4),
    "Fresh Market Grocery": (3, 4, 5),
}
RATERS = ("alice.brown@email.com", "bob.davis@tech.com", "carol.white@style.com")


def load_all_data():
    init_db()
    session = SessionLocal()
    try:
        # Clear existing data, children first
        session.query(Rating).delete()
        session.query(Store).delete()
        session.query(User).delete()
        session.commit()

        users = {}
        for name, email, address, password, role in SAMPLE_USERS:
            user = User(name=name, email=email, address=address,
                        password_hash=get_password_hash(password), role=role)
            session.add(user)
            users[email] = user
        session.flush()

        stores = {}
        for name, address, owner_email in SAMPLE_STORES:
            store = Store(name=name, address=address, owner_id=users[owner_email].id)
            session.add(store)
            stores[name] = store
        session.flush()

        for store_name, values in SAMPLE_RATINGS.items():
            for email, value in zip(RATERS, values):
                session.add(Rating(user_id=users[email].id, store_id=stores[store_name].id, rating_value=value))

        session.commit()

        print(f"Users: {session.query(User).count()}")
        print(f"Stores: {session.query(Store).count()}")
        print(f"Ratings: {session.query(Rating).count()}")
        print("\nLogin credentials:")
        for name, email, _, password, role in SAMPLE_USERS:
            print(f"  {role.value:<12} {email} / {password}")
    except Exception:
        session.rollback()
        logger.exception("Seeding failed")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    load_all_data()
