"""Initialize database (create tables). Run: python backend/init_db.py"""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from productreview.database import engine, Base
from productreview import product_models, review_models  # noqa: F401


def init():
    Base.metadata.create_all(bind=engine)


if __name__ == '__main__':
    print('Initializing DB...')
    init()
    print('DB initialized.')
