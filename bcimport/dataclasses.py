import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

UNTITLED = "Untitled"
UNKNOWN_ARTIST = "Unknown Artist"
NO_PRICE = "N/A"


def _env_flag(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(repr=True)
class ImportConfig:
    """Configuration for Bandcamp catalog imports."""
    # Storefront paths
    login_path: str = "/login"
    listing_path: str = "/music"
    release_path_prefix: str = "/album/"
    cover_art_template: str = "https://f4.bcbits.com/img/a{art_id}_10.jpg"

    # HTTP settings
    user_agent: str = "bcimport/1.0"
    request_timeout: Optional[float] = None  # None = wait indefinitely

    # Batch behaviour
    isolate_release_failures: bool = False  # Keep importing when one release page fails

    # Web server
    server_host: str = "localhost"
    server_port: int = 3000

    # BeautifulSoup tree builder
    html_parser: str = "lxml"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'ImportConfig':
        """Create ImportConfig from BCIMPORT_* environment variables."""
        env = os.environ if environ is None else environ
        defaults = cls()

        timeout = env.get('BCIMPORT_REQUEST_TIMEOUT')
        port = env.get('BCIMPORT_PORT')

        return cls(
            user_agent=env.get('BCIMPORT_USER_AGENT', defaults.user_agent),
            request_timeout=float(timeout) if timeout else defaults.request_timeout,
            isolate_release_failures=_env_flag(env.get('BCIMPORT_ISOLATE_RELEASE_FAILURES'),
                                               defaults.isolate_release_failures),
            server_host=env.get('BCIMPORT_HOST', defaults.server_host),
            server_port=int(port) if port else defaults.server_port,
        )

    def cover_art_url(self, art_id: Any) -> str:
        """Build the cover image URL for a Bandcamp art identifier."""
        return self.cover_art_template.format(art_id=art_id)


@dataclass(frozen=True)
class Track:
    """A single entry of a release's track list."""
    title: str

    def to_dict(self) -> Dict[str, str]:
        return {'title': self.title}


@dataclass(repr=True)
class ReleaseRecord:
    """Normalized metadata for one Bandcamp release."""
    title: str = UNTITLED
    artist: str = UNKNOWN_ARTIST
    cover_art: str = ""
    price: str = NO_PRICE
    tags: List[str] = field(default_factory=list)
    description: str = ""
    tracks: List[Track] = field(default_factory=list)
    error: Optional[str] = None  # Only set for releases skipped by an isolating import

    @classmethod
    def failed(cls, message: str) -> 'ReleaseRecord':
        """Placeholder record for a release page that could not be fetched."""
        return cls(error=message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape returned by the import endpoint."""
        data = {
            'title': self.title,
            'artist': self.artist,
            'coverArt': self.cover_art,
            'price': self.price,
            'description': self.description,
            'tags': list(self.tags),
            'tracks': [track.to_dict() for track in self.tracks],
        }
        if self.error is not None:
            data['error'] = self.error
        return data


@dataclass(repr=True)
class TralbumData:
    """Fields read from the embedded TralbumData object of a release page.

    Every field is optional; ``has_digital_price`` records whether the
    ``digital_price`` key was present at all so that a price of ``0`` is not
    confused with a missing one.
    """
    current_title: Optional[str] = None
    current_artist: Optional[str] = None
    current_about: Optional[str] = None
    artist: Optional[str] = None
    art_id: Optional[Any] = None
    digital_price: Optional[Any] = None
    has_digital_price: bool = False
    tags: List[Any] = field(default_factory=list)
    trackinfo: List[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'TralbumData':
        """Create TralbumData from a decoded blob, ignoring unexpected shapes."""
        current = data.get('current')
        if not isinstance(current, Mapping):
            current = {}

        tags = data.get('tags')
        trackinfo = data.get('trackinfo')

        return cls(
            current_title=current.get('title'),
            current_artist=current.get('artist'),
            current_about=current.get('about'),
            artist=data.get('artist'),
            art_id=data.get('art_id'),
            digital_price=data.get('digital_price'),
            has_digital_price=data.get('digital_price') is not None,
            tags=tags if isinstance(tags, list) else [],
            trackinfo=trackinfo if isinstance(trackinfo, list) else [],
        )
