import os

import uvicorn
from wgswitch.main import app
from wgswitch.logging_utility import logger


if __name__=='__main__':
    host = os.environ.get("WGSWITCH_HOST", "127.0.0.1")
    port = int(os.environ.get("WGSWITCH_PORT", "8000"))
    logger.info(f"Starting wgswitch API on {host}:{port}")
    uvicorn.run(app, host=host, port=port)
