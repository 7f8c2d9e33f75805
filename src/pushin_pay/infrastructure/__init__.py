from pushin_pay.infrastructure.http_client import PushinPayHttpClient


__all__ = ["PushinPayHttpClient"]
