import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from app.auth.jwt import create_access_token
from app.core.config import get_config
from app.core.exceptions import PortalException
from app.database.db import get_db_session
from app.models import ReturnPrepStatus, Tenant, User
from app.services.client_service import ClientService
from app.services.pipeline_service import PipelineService
from app.services.product_service import ProductService, StageSpec

DEMO_CLIENTS = [
    ("sarah@example.com", "Sarah", "Connor", ReturnPrepStatus.INFORMATION_REVIEW),
    ("miles@example.com", "Miles", "Dyson", ReturnPrepStatus.RETURN_PREPARATION),
    ("kyle@example.com", "Kyle", "Reese", ReturnPrepStatus.FILED),
]


def seed_portal():
    config = get_config()
    with get_db_session() as db:
        tenant = db.query(Tenant).filter(Tenant.name == "demo").first()
        if tenant:
            print("Seed tenant already exists.")
            return
        tenant = Tenant(name="demo")
        db.add(tenant)
        db.flush()
        admin = User(tenant_id=tenant.id, email="admin@example.com", first_name="Demo", is_admin=True)
        db.add(admin)
        db.commit()

        try:
            clients = ClientService(tenant.id, db=db)
            pipeline = PipelineService(tenant.id, db=db)
            for email, first_name, last_name, status in DEMO_CLIENTS:
                client = clients.onboard_client(email, first_name, last_name, tax_year=config.DEFAULT_TAX_YEAR)
                pipeline.set_return_state(client.returns[0].id, status, acting_admin_id=admin.id)

            products = ProductService(tenant.id, db=db)
            bookkeeping = products.create_product(
                "Bookkeeping",
                stages=[StageSpec("Intake"), StageSpec("Reconciliation"), StageSpec("Delivered")],
            )
            first_client = clients.list_clients()[0]
            products.assign_product(first_client.id, bookkeeping.id)
        except PortalException as e:
            print(f"Error seeding data: {e}")
            return

        token = create_access_token(
            user_id=admin.id,
            tenant_id=tenant.id,
            role="admin",
            secret=config.JWT_SECRET,
            ttl_minutes=config.JWT_ACCESS_TTL_MINUTES,
        )
        print(f"Seeded tenant {tenant.id} with {len(DEMO_CLIENTS)} clients.")
        print(f"Admin bearer token: {token}")


if __name__ == "__main__":
    seed_portal()
