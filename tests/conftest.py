import sys
from pathlib import Path


def pytest_sessionstart(session):
    # Garante que o pacote bucket_connector seja importável a partir da raiz
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))
