# functions-python/main.py
"""
Firebase Cloud Functions (Gen2, Python) — admin callables for the song quiz
backend.

All functions here are https callable; the client invokes them with
httpsCallable(functions, 'name').
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict

import firebase_admin
from firebase_admin import firestore as admin_fs
from firebase_functions import https_fn, options
from google.cloud.firestore import Client

from admin_logic.authz import Caller
from admin_logic.config import AdminConfig
from admin_logic.firebase import FirebaseIdentityProvider, FirestoreStore
from admin_logic.service import AdminService

# -------------------------
# Region and timeout
# -------------------------
options.set_global_options(region="us-central1", timeout_sec=120)

# -------------------------
# Admin SDK
# -------------------------
if not firebase_admin._apps:
    # For local runs point the SDK at the emulators:
    #   FIRESTORE_EMULATOR_HOST=127.0.0.1:8080
    #   FIREBASE_AUTH_EMULATOR_HOST=127.0.0.1:9099
    firebase_admin.initialize_app()

db: Client = admin_fs.client()


@lru_cache(maxsize=1)
def _service() -> AdminService:
    # params resolve only inside a running function, so build on first call
    return AdminService(
        AdminConfig.from_params(),
        FirebaseIdentityProvider(),
        FirestoreStore(db),
    )


# -------------------------
# Endpoints callable
# -------------------------

@https_fn.on_call()
def grant_admin(req: https_fn.CallableRequest) -> Dict[str, Any]:
    return _service().grant_admin(Caller.from_auth(req.auth), req.data or {}).unwrap()


@https_fn.on_call()
def revoke_admin(req: https_fn.CallableRequest) -> Dict[str, Any]:
    return _service().revoke_admin(Caller.from_auth(req.auth), req.data or {}).unwrap()


@https_fn.on_call()
def check_admin_status(req: https_fn.CallableRequest) -> Dict[str, Any]:
    return _service().check_admin_status(Caller.from_auth(req.auth)).unwrap()


@https_fn.on_call()
def get_admin_stats(req: https_fn.CallableRequest) -> Dict[str, Any]:
    return _service().get_admin_stats(Caller.from_auth(req.auth)).unwrap()
