from pathlib import Path

from sqlmodel import SQLModel, create_engine

from paywall.config import settings

# Ensure database directory exists before creating engine
Path(settings.db_path).parent.mkdir(parents=True, exist_ok=True)

engine = create_engine(
    f"sqlite:///{settings.db_path}",
    echo=False,
    connect_args={"check_same_thread": False},
)

def init_db() -> None:
    import paywall.models.user  # noqa: F401
    import paywall.models.subscription  # noqa: F401
    SQLModel.metadata.create_all(engine)
