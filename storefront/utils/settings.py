# storefront/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8080/api")
MERCHANT_WHATSAPP_NUMBER = os.getenv("MERCHANT_WHATSAPP_NUMBER", "250788883986")
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", 10))
#order beacon gives up after this many seconds
BEACON_TIMEOUT_SECONDS = float(os.getenv("BEACON_TIMEOUT_SECONDS", 5))

#cart persistence: file | redis | memory
CART_STORAGE_BACKEND = os.getenv("CART_STORAGE_BACKEND", "file")
CART_STORAGE_PATH = os.getenv("CART_STORAGE_PATH", ".storefront/cart.json")
CART_STORAGE_KEY = os.getenv("CART_STORAGE_KEY", "kb_cart")
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

#order submission: thread | celery
CHECKOUT_SUBMITTER = os.getenv("CHECKOUT_SUBMITTER", "thread")
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", REDIS_URL)
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/2")

TRACK_POLL_INTERVAL_SECONDS = float(os.getenv("TRACK_POLL_INTERVAL_SECONDS", 15))
