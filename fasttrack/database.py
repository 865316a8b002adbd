from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool
from fasttrack.config import settings
from fasttrack.utils.logger import get_logger

logger = get_logger(__name__)

# Connection pool sizing per API container
POOL_SIZE = 5
MAX_OVERFLOW = 10
POOL_TIMEOUT = 30
POOL_RECYCLE = 1800
POOL_PRE_PING = True

# Lazily initialised so each Gunicorn worker builds its own pool
_engine = None
_session_local = None

def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")

def get_engine():
    """Get database engine with lazy initialization for Gunicorn worker compatibility."""
    global _engine
    if _engine is None:
        url = settings.DATABASE_URL
        if _is_sqlite(url):
            # Local development and tests: one shared connection
            _engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
                echo=settings.DEBUG,
            )
            logger.info("Database engine configured for SQLite")
        else:
            _engine = create_engine(
                url,
                poolclass=QueuePool,
                pool_size=POOL_SIZE,
                max_overflow=MAX_OVERFLOW,
                pool_timeout=POOL_TIMEOUT,
                pool_recycle=POOL_RECYCLE,
                pool_pre_ping=POOL_PRE_PING,
                echo=settings.DEBUG,
            )
            logger.info(f"Database pool configured: size={POOL_SIZE}, max_overflow={MAX_OVERFLOW}, timeout={POOL_TIMEOUT}s")
    return _engine

def get_session_local():
    """Get SessionLocal with lazy initialization for Gunicorn worker compatibility."""
    global _session_local
    if _session_local is None:
        _session_local = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=get_engine())
    return _session_local

engine = get_engine()

Base = declarative_base()

def get_db():
    """
    Database dependency for FastAPI.
    Provides a session and rolls it back if the request handler fails.
    """
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database session error: {e}")
        try:
            db.rollback()
        except Exception as rollback_error:
            logger.error(f"Error during rollback: {rollback_error}")
        raise
    finally:
        db.close()

def get_pool_status():
    """Current connection pool status, for the health endpoint."""
    pool = get_engine().pool
    status = {"pool_type": type(pool).__name__}
    if isinstance(pool, QueuePool):
        status.update({
            "pool_size": pool.size(),
            "checked_in": pool.checkedin(),
            "checked_out": pool.checkedout(),
            "overflow": pool.overflow(),
        })
    return status
