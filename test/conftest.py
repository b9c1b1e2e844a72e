"""
Shared fixtures: ephemeral ports and a throwaway kiosk asset bundle.
"""

import socket
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


INDEX_HTML = '<!DOCTYPE html><html><head><title>Kiosk Test</title></head><body></body></html>'


@pytest.fixture
def port():
    """A TCP port that was free a moment ago"""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(('127.0.0.1', 0))
        return sock.getsockname()[1]


@pytest.fixture
def publicDir(tmp_path):
    """Asset bundle with an entry document, one script and one nested asset"""
    public = tmp_path / 'public'
    (public / 'assets').mkdir(parents=True)
    (public / 'index.html').write_text(INDEX_HTML, encoding='utf-8')
    (public / 'app.js').write_text('console.log("kiosk");', encoding='utf-8')
    (public / 'assets' / 'logo.svg').write_text('<svg/>', encoding='utf-8')
    (tmp_path / 'secret.txt').write_text('outside', encoding='utf-8')
    return public
