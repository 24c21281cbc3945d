from backend.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from backend.app.models.payment_fms import PaymentFms  # noqa: F401
from backend.app.models.payment_fms_event import PaymentFmsEvent  # noqa: F401
from backend.app.models.account_entry import AccountEntry  # noqa: F401
from backend.app.models.subscription import Subscription  # noqa: F401
from backend.app.models.subscription_renewal import SubscriptionRenewal  # noqa: F401
