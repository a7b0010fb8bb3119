from app.db.base_class import Base
from app.db.session import engine

# IMPORTAR TODOS OS MODELOS para que o SQLAlchemy registre no metadata
from app.api.models import (  # noqa: F401
    appointment,
    calendar,
    medical_record,
    profile,
    security,
    service,
    setting,
    webhook_log,
)


def create_all():
    print("📦 Criando tabelas no banco...")
    Base.metadata.create_all(bind=engine)
    print("✅ Tabelas criadas com sucesso!")


if __name__ == "__main__":
    create_all()
