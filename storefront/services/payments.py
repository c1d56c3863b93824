"""Card payment gateway adapters.

A gateway turns a single-use card token, produced client-side by the
gateway's own JS library, into a captured charge.  Both adapters return
a ``ChargeResult`` and never raise for a declined or failed charge.
"""
import logging, uuid
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
import httpx
from pydantic import BaseModel
from storefront.core.config import Settings

log = logging.getLogger(__name__)

SQUARE_BASE_URLS = {
    'sandbox': 'https://connect.squareupsandbox.com',
    'production': 'https://connect.squareup.com',
}

class ChargeResult(BaseModel):
    success: bool
    payment_id: Optional[str] = None
    error: Optional[str] = None

def to_cents(amount: Decimal) -> int:
    return int((Decimal(amount) * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))

class SquareGateway:
    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None):
        self.settings = settings
        self.base_url = SQUARE_BASE_URLS.get(settings.SQUARE_ENVIRONMENT, SQUARE_BASE_URLS['sandbox'])
        self._client = client

    def _http(self) -> httpx.Client:
        if self._client is not None:
            return self._client
        return httpx.Client(timeout=self.settings.PAYMENT_TIMEOUT_SECONDS)

    def charge(self, token: str, amount: Decimal, order_ref: int, buyer_email: Optional[str]) -> ChargeResult:
        body = {
            'source_id': token,
            # fresh key per attempt: a retried call is a new charge as far as Square knows
            'idempotency_key': str(uuid.uuid4()),
            'amount_money': {'amount': to_cents(amount), 'currency': self.settings.CURRENCY},
            'location_id': self.settings.SQUARE_LOCATION_ID,
            'reference_id': str(order_ref),
            'note': f'Payment for order #{order_ref} on {self.settings.STORE_NAME}',
        }
        if buyer_email:
            body['buyer_email_address'] = buyer_email
        headers = {
            'Authorization': f'Bearer {self.settings.SQUARE_ACCESS_TOKEN}',
            'Square-Version': self.settings.SQUARE_API_VERSION,
        }
        client = self._http()
        try:
            resp = client.post(f'{self.base_url}/v2/payments', json=body, headers=headers)
        except httpx.RequestError as e:
            log.error('Square request failed for order %s: %s', order_ref, e)
            return ChargeResult(success=False, error='Payment gateway unavailable')
        finally:
            if client is not self._client:
                client.close()

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if resp.status_code >= 400 or data.get('errors'):
            errors = data.get('errors') or []
            detail = errors[0].get('detail') if errors else None
            log.warning('Square declined order %s: %s', order_ref, detail or resp.status_code)
            return ChargeResult(success=False, error=detail or 'Payment processing failed')

        payment = data.get('payment') or {}
        if not payment.get('id'):
            return ChargeResult(success=False, error='Payment processing failed')
        return ChargeResult(success=True, payment_id=payment['id'])

class MockGateway:
    """Approves every token except ones starting with ``fail``."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def charge(self, token: str, amount: Decimal, order_ref: int, buyer_email: Optional[str]) -> ChargeResult:
        if token.startswith('fail'):
            return ChargeResult(success=False, error='Card declined')
        return ChargeResult(success=True, payment_id=f'pay_{order_ref}_{uuid.uuid4().hex[:12]}')

def build_gateway(settings: Settings):
    if settings.PAYMENT_GATEWAY == 'square':
        return SquareGateway(settings)
    return MockGateway(settings)
