"""Seed demo users (one per role) and a handful of medicines and orders."""
import logging
from datetime import date, timedelta
from decimal import Decimal

from medtrack.core.security import hash_password
from medtrack.db import session as db_session
from medtrack.db.init_db import init_db
from medtrack.models.enums import OrderStatus, OrderType, Role
from medtrack.models.medicine import Medicine
from medtrack.models.order import Order
from medtrack.models.user import User, UserRoleAssignment

logger = logging.getLogger("medtrack.seed")

DEMO_PASSWORD = "Pass123!"


def run_seed():
    init_db()
    db = db_session.SessionLocal()

    try:
        def get_or_create(model, defaults=None, **kwargs):
            instance = db.query(model).filter_by(**kwargs).first()
            if instance:
                return instance, False
            params = dict(kwargs)
            if defaults:
                params.update(defaults)
            instance = model(**params)
            db.add(instance)
            return instance, True

        users = {}
        for role, email, full_name in [
            (Role.ADMIN, "admin@medtrack.local", "Admin"),
            (Role.SUPPLIER, "supplier@medtrack.local", "Demo Supplier"),
            (Role.PHARMACIST, "pharmacist@medtrack.local", "Demo Pharmacist"),
        ]:
            user, _ = get_or_create(
                User,
                email=email,
                defaults={"full_name": full_name, "password_hash": hash_password(DEMO_PASSWORD)},
            )
            db.flush()
            get_or_create(UserRoleAssignment, user_id=user.id, role=role)
            users[role] = user
        db.commit()

        today = date.today()
        for name, batch_no, category, manufacturer, expires_in, quantity, price, reorder in [
            ("Paracetamol 500mg", "PCM-2401", "Analgesic", "Sun Pharma", 400, 240, "1.20", 50),
            ("Amoxicillin 250mg", "AMX-2312", "Antibiotic", "Cipla", 20, 35, "4.75", 40),
            ("Cetirizine 10mg", "CTZ-2402", "Antihistamine", "Dr. Reddy's", 180, 8, "0.90", 20),
            ("Insulin Glargine", "INS-2311", "Antidiabetic", "Biocon", -3, 12, "310.00", 10),
            ("ORS Sachet", "ORS-2403", "Electrolyte", "FDC", 700, 500, "0.35", 100),
        ]:
            get_or_create(
                Medicine,
                batch_no=batch_no,
                defaults={
                    "name": name,
                    "category": category,
                    "manufacturer": manufacturer,
                    "expiry_date": today + timedelta(days=expires_in),
                    "quantity": quantity,
                    "unit_price": Decimal(price),
                    "reorder_level": reorder,
                    "supplier_id": users[Role.SUPPLIER].id,
                },
            )
        db.commit()

        for order_type, status, amount, notes, creator in [
            (OrderType.PURCHASE, OrderStatus.PENDING, "1200.00", "Monthly analgesic restock", Role.PHARMACIST),
            (OrderType.PURCHASE, OrderStatus.APPROVED, "3720.00", "Insulin cold-chain delivery", Role.SUPPLIER),
            (OrderType.ISSUE, OrderStatus.DELIVERED, "90.00", "Ward 3 issue", Role.PHARMACIST),
        ]:
            get_or_create(
                Order,
                notes=notes,
                defaults={
                    "order_type": order_type,
                    "status": status,
                    "total_amount": Decimal(amount),
                    "created_by": users[creator].id,
                },
            )
        db.commit()

        logger.info("Seed completed; demo password is %s", DEMO_PASSWORD)

    except Exception:
        db.rollback()
        logger.exception("Seed failed")
        raise

    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run_seed()
