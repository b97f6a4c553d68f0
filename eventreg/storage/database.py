import logging
import os
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_engine_from_url(database_url: str):
    """
    Cria um engine SQLAlchemy a partir de uma URL de banco de dados.
    
    Para PostgreSQL, usa pool_pre_ping=True para detectar conexões perdidas.
    Para SQLite, libera o uso da conexão fora da thread que a criou,
    já que os endpoints síncronos rodam no threadpool.
    """
    is_postgres = "postgres" in database_url.lower()

    if is_postgres:
        engine = create_engine(
            database_url,
            echo=False,
            pool_pre_ping=True,  # Verifica conexões antes de usar
            pool_size=5,
            max_overflow=10,
        )
        logger.info("Engine PostgreSQL criado com pool_pre_ping=True")
    elif database_url.startswith("sqlite"):
        # O arquivo do SQLite é criado na conexão, mas o diretório não
        db_path = make_url(database_url).database
        if db_path and db_path != ":memory:":
            os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
        engine = create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
        )
        logger.info("Engine SQLite criado")
    else:
        engine = create_engine(database_url, echo=False)
        logger.info("Engine criado")

    return engine


def create_session_factory(database_url: str, create_tables: bool = False, env: str = "dev"):
    """
    Cria uma factory de sessões SQLAlchemy.
    
    Args:
        database_url: URL de conexão do banco
        create_tables: Se True, cria tabelas automaticamente (apenas para dev/test)
                      Em produção, use migrações Alembic!
        env: Ambiente atual ("dev" ou "prod")
    """
    # Registra as tabelas no metadata antes do create_all
    from . import models  # noqa: F401

    engine = create_engine_from_url(database_url)

    if create_tables:
        if env == "prod":
            logger.warning(
                "⚠️  create_tables=True em produção! "
                "Use migrações Alembic ao invés de criar tabelas automaticamente."
            )
        else:
            logger.info("Criando tabelas automaticamente (modo dev/test)")
            Base.metadata.create_all(bind=engine)

    return sessionmaker(bind=engine, expire_on_commit=False)
