from sqlmodel import create_engine
from pos_discounts.core.config import settings


connect_args = {"check_same_thread": False} if settings.is_sqlite else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
