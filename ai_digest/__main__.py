"""Allow running the digest with ``python -m ai_digest``."""

from ai_digest.main import main

if __name__ == "__main__":
    main()
