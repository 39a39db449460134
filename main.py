from dotenv import load_dotenv

load_dotenv(override=True)

from haconnect.config import load_config
from haconnect.core import run

def main():
    config = load_config()
    run(config)

if __name__ == "__main__":
    main()
