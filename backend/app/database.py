"""
Configuration de la connexion à la base de données.
PostgreSQL en production, tout dialecte SQLAlchemy en test (SQLite en mémoire).
"""

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker

from app.config import settings

logger = logging.getLogger(__name__)

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dépendance FastAPI : fournit une session BDD par requête et la ferme après usage."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """
    Crée les tables manquantes au démarrage.
    Sert aussi de test de connexion : une base injoignable fait échouer le démarrage.
    """
    import app.models  # noqa: F401  enregistre les modèles dans Base.metadata

    Base.metadata.create_all(bind=engine)
    logger.info("Connexion à la base de données établie, schéma vérifié.")
