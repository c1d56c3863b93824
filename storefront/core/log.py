import logging, time
from fastapi import FastAPI, Request

LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'
MAX_LINE = 80

access_log = logging.getLogger('storefront.access')

def configure_logging(level: str = 'INFO'):
    root = logging.getLogger('storefront')
    root.setLevel(level.upper())
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

def install_request_logging(app: FastAPI):
    @app.middleware('http')
    async def log_api_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        path = request.url.path
        if path.startswith('/api'):
            took = int((time.perf_counter() - start) * 1000)
            line = f'{request.method} {path} {response.status_code} in {took}ms'
            if len(line) > MAX_LINE:
                line = line[:MAX_LINE - 1] + '…'
            access_log.info(line)
        return response
