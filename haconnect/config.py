from dataclasses import dataclass, field
import os
import tempfile
from dotenv import load_dotenv

from .params import ParameterSet, parse_params

@dataclass
class Config:
    base_dir: str
    log_path: str
    params: ParameterSet = field(default_factory=dict)

def load_config():
    load_dotenv(override=True)
    raw_params = os.getenv("HACONNECT_PARAMS", "")
    return Config(
        base_dir=os.getenv("HACONNECT_BASE_DIR", tempfile.gettempdir()),
        log_path=os.getenv("HACONNECT_LOG_PATH", "haconnect.log"),
        params=parse_params(p for p in raw_params.split(";") if p.strip()),
    )
