"""
Checkout services.

Implements the write paths of the checkout that go beyond a single
session: loading or opening the cashier's session and submitting a
finished sale to the backend.
"""

import logging

from django.db import transaction
from django.utils import timezone

from apps.sales.models import Transaction

from .api_client import BackendAPIClient
from .builder import build_transaction_request
from .exceptions import BackendAPIError, CheckoutSubmissionError
from .models import CheckoutSession

logger = logging.getLogger(__name__)


def get_checkout_session(tenant_id, cashier):
    """Return the cashier's checkout session for the store, creating it if needed."""
    session, created = CheckoutSession.objects.get_or_create(tenant_id=tenant_id, cashier=cashier)
    if created:
        logger.info(f"Opened checkout session {session.id} for {cashier} in tenant {tenant_id}")
    return session


def lock_checkout_session(tenant_id, cashier):
    """
    Return the cashier's session with its row locked.

    Must be called inside ``transaction.atomic()``. Writes made under the
    lock cannot overwrite the in-flight flag set by ``CheckoutService``.
    """
    session = get_checkout_session(tenant_id, cashier)
    return CheckoutSession.objects.select_for_update().get(id=session.id)


class CheckoutService:
    """
    Submit a checkout session as a backend transaction.

    A session is guarded by ``is_submitting`` (set under a row lock) and
    by its idempotency key, so pressing "complete" twice never creates
    two sales.
    """

    def __init__(self, client=None):
        self.client = client

    def _client_for(self, tenant_id):
        return self.client or BackendAPIClient.from_settings(tenant_id=tenant_id)

    def submit(self, session_id, cashier, *, mark_as_due=False):
        """
        Submit the session's cart.

        Args:
            session_id: Checkout session to submit
            cashier: User completing the sale
            mark_as_due: Record a partial payment; the unpaid part becomes due

        Returns:
            The recorded ``Transaction``, or None when the session cannot be
            submitted (wrong step, empty cart, already submitting or
            insufficient payment).

        Raises:
            CheckoutSubmissionError: the backend rejected the sale or could
                not be reached. The session keeps its cart and step.

        Any other error is re-raised after the in-flight flag is cleared. The
        idempotency key is kept, so a retry of a sale the backend already
        accepted is not recorded twice there.
        """
        with transaction.atomic():
            session = CheckoutSession.objects.select_for_update().get(
                id=session_id, cashier=cashier
            )
            if not session.can_submit(mark_as_due=mark_as_due):
                logger.info(f"Checkout session {session.id} is not ready for submission")
                return None

            session.is_submitting = True
            session.last_error = ""
            session.save(update_fields=["is_submitting", "last_error", "updated_at"])

        log_context = {
            "checkout_session": str(session.id),
            "tenant_id": session.tenant_id,
            "idempotency_key": str(session.idempotency_key),
        }

        try:
            record = self._send_and_record(session, cashier, mark_as_due, log_context)
        except BackendAPIError as e:
            self._release(session, e.message)
            logger.warning(
                f"Checkout session {session.id} submission failed: {e.message}",
                extra={**log_context, "status_code": e.status_code},
            )
            raise CheckoutSubmissionError(e.message, session_id=session.id) from e
        except Exception:
            self._release(session, "The sale could not be completed. Please try again.")
            logger.exception(
                f"Unexpected error submitting checkout session {session.id}", extra=log_context
            )
            raise

        return record

    def _send_and_record(self, session, cashier, mark_as_due, log_context):
        cart = session.cart
        customer = session.get_customer()
        payment = session.payment_check(mark_as_due=mark_as_due)
        due_amount = payment.due if mark_as_due else 0

        request = build_transaction_request(
            cart,
            customer,
            session.payment_method,
            payment.amount_paid,
            due_amount=due_amount,
        )

        logger.info(f"Submitting checkout session {session.id}", extra=log_context)
        result = self._client_for(session.tenant_id).create_transaction(
            request, idempotency_key=session.idempotency_key
        )

        with transaction.atomic():
            record = Transaction.objects.record_checkout(
                tenant_id=session.tenant_id,
                cashier=cashier,
                cart=cart,
                customer=customer,
                request=request,
                result=result,
                payment=payment,
            )
            session.reset()
            session.save()

        logger.info(
            f"Checkout session {session.id} recorded as transaction {record.id}",
            extra={**log_context, "backend_transaction_id": result.id},
        )
        return record

    @staticmethod
    def _release(session, message):
        """Clear the in-flight flag, keeping the cart and idempotency key for a retry."""
        CheckoutSession.objects.filter(id=session.id).update(
            is_submitting=False, last_error=message, updated_at=timezone.now()
        )
        session.is_submitting = False
        session.last_error = message
