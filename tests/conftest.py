"""
Pytest configuration and shared fixtures for share image tests.
"""
import io
import pytest
from pathlib import Path
from tempfile import TemporaryDirectory

from PIL import Image

from musicshare.models import AspectRatio, BackgroundStyle, FontStyle, MusicMetadata, StyleOptions


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that's cleaned up after each test."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def history_path(temp_dir):
    return temp_dir / 'history.json'


@pytest.fixture
def red_artwork():
    return Image.new('RGB', (300, 300), (255, 0, 0))


@pytest.fixture
def two_tone_artwork():
    """50x50 image: top half red, bottom half blue."""
    img = Image.new('RGB', (50, 50), (255, 0, 0))
    img.paste((0, 0, 255), (0, 25, 50, 50))
    return img


@pytest.fixture
def sample_metadata():
    return MusicMetadata(
        kind='collection',
        artist_name='A',
        collection_name='T',
        genre='G',
        release_date='2024',
    )


@pytest.fixture
def sample_record():
    """One iTunes lookup result for a song."""
    return {
        'wrapperType': 'track',
        'artistName': 'Test Artist',
        'collectionName': 'Test Album',
        'trackName': 'Test Song',
        'artworkUrl100': 'https://is1-ssl.mzstatic.com/image/thumb/abc/100x100bb.jpg',
        'primaryGenreName': 'J-Pop',
        'releaseDate': '2024-07-04T07:00:00Z',
        'collectionId': 1440857781,
        'trackId': 1440857782,
    }


@pytest.fixture
def basic_options():
    return StyleOptions(
        aspect_ratio=AspectRatio.THREE_FOUR,
        background_style=BackgroundStyle.AVERAGE_COLOR,
        font_style=FontStyle.STANDARD,
        qr_visible=False,
    )


@pytest.fixture
def png_bytes():
    buf = io.BytesIO()
    Image.new('RGB', (64, 64), (20, 120, 200)).save(buf, format='PNG')
    return buf.getvalue()
