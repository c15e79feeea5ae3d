"""
Flask 앱 팩토리
===============

    FIBZK_DB=db.json python app.py

FIBZK_DB 환경 변수(또는 create_app의 db_path)가 TinyDB 저장 위치를 정한다.
":memory:"이면 MemoryStorage를 쓴다.
"""

import os

from flask import Flask
from tinydb import TinyDB
from tinydb.storages import MemoryStorage

from fib_routes import fib_bp, init_fib_bp


DEFAULT_DB_PATH = "db.json"


def create_app(db_path=None):
    if db_path is None:
        db_path = os.environ.get("FIBZK_DB", DEFAULT_DB_PATH)

    if db_path == ":memory:":
        db = TinyDB(storage=MemoryStorage)  # Memory DB
    else:
        db = TinyDB(db_path)                # Storage DB

    app = Flask(__name__)
    app.config["FIBZK_DB"] = db_path
    app.extensions["fibzk_db"] = db.table("fib")
    init_fib_bp(app.extensions["fibzk_db"])
    app.register_blueprint(fib_bp)
    return app


if __name__ == "__main__":
    create_app().run(debug=True)
