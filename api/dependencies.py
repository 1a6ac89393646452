# api/dependencies.py
from fastapi import Request

from core.services.book_list_sync import ErrorPolicy, error_policy_from_config
from core.utils.http import MolyDownloader

def get_downloader(request: Request) -> MolyDownloader:
    """The downloader opened by the app lifespan, shared by every request"""
    return request.app.state.downloader

def get_error_policy() -> ErrorPolicy:
    return error_policy_from_config()
