import uvicorn
from jpt.config.settings import Service2Settings
from jpt.main import create_app

settings = Service2Settings()
app = create_app(settings)


def run():
    uvicorn.run("service2.main:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    run()
