import logging, sys

FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# chatty per-request loggers from the HTTP stack
QUIET = ("httpx", "httpcore")


def configure_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(FORMAT))
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    for name in QUIET:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))
