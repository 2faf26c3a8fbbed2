from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from motorent.config import get_settings

# La URL viene de MOTORENT_DATABASE_URL (por defecto SQLite local)
SQLALCHEMY_DATABASE_URL = get_settings().database_url

# connect_args={"check_same_thread": False} es necesario solo para SQLite
connect_args = {"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ESTA es la Base que todos los modelos deben usar
Base = declarative_base()

# Dependencia para obtener la DB en los endpoints
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
