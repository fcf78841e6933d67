import uvicorn

from .logging import setup_logging
from .settings import get_settings


def main():
    s = get_settings()
    log = setup_logging(s.log_level)
    log.info("server_start", host=s.host, port=s.port, exec_dir=str(s.exec_dir))
    uvicorn.run("judge.api.app:app", host=s.host, port=s.port)


if __name__ == "__main__":
    main()
