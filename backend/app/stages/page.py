"""Per-view page configuration handed to the layout."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PageConfig:
    title: str
    subtitle: str = ""


REQUEST_FORM_PAGE = PageConfig("Payment Request Form", "Raise a payment request for approval")
APPROVAL_PAGE = PageConfig("Payment Approval", "Approve or reject pending payment requests")
MAKE_PAYMENT_PAGE = PageConfig("Make Payment", "Record payment for approved requests")
TALLY_ENTRY_PAGE = PageConfig("Tally Entry", "Mark paid requests as entered in Tally")
AUDIT_PAGE = PageConfig("Audit Stage", "Audit bills per FMS")
RECTIFY_PAGE = PageConfig("Rectify Stage", "Review and rectify rejected entries")
TALLY_DATA_PAGE = PageConfig("Tally Data", "Audited bills ready for filing")
BILL_FILED_PAGE = PageConfig("Bill Filed", "View all completed and filed bills")
SUBSCRIPTIONS_PAGE = PageConfig("All Subscriptions", "Register and track subscriptions")
SUBSCRIPTION_APPROVAL_PAGE = PageConfig("Subscription Approval", "Approve or reject new subscriptions")
SUBSCRIPTION_PAYMENT_PAGE = PageConfig("Subscription Payment", "Record payment for approved subscriptions")
SUBSCRIPTION_RENEWAL_PAGE = PageConfig("Subscription Renewal", "Renew subscriptions nearing their end date")
