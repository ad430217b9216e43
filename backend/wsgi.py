import os
from knowledge_base import create_app

app = create_app(os.getenv("FLASK_CONFIG", "development"))
