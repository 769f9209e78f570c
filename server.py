# server.py
# gunicorn entrypoint: `gunicorn -c gunicorn_conf.py server:app`
from postgen.main import app

if __name__ == "__main__":
    import os

    import uvicorn

    from postgen.config import config

    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "8080")), log_level=config.log_level.lower())
