#setup: pip install -e .
#setup: flask --app wealth_planner.wsgi run --port 5000 --debug

import logging

from wealth_planner.app import create_app

app = create_app()

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(port=5000, debug=True)
