"""
Admin endpoints of the ESCT API (``/admin/*``).

Thin wrappers: each call returns the full response body (``{success, data,
message}``) so admin screens can read ``data`` and ``message`` themselves.
Failures surface as ``ApiError`` from the underlying client.
"""

import logging
from typing import Any, Mapping, Optional

from api_client import EsctApiClient, FileUpload, build_form_data
from schemas import CAP_CODES, ClaimStatus, ClaimType

log = logging.getLogger(__name__)

UPLOAD_FIELD = "profilePhoto"


class AdminApiClient:
    def __init__(self, client: EsctApiClient):
        self.client = client

    # ---- Dashboard ----

    async def get_dashboard(self) -> Any:
        return await self.client.get("/admin/dashboard")

    # ---- Users ----

    async def get_users(self, filters: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.client.get("/admin/users", params=filters)

    async def get_user(self, user_id: str) -> Any:
        return await self.client.get(f"/admin/users/{user_id}")

    async def update_user_status(self, user_id: str, is_active: bool) -> Any:
        log.info(f"Setting user {user_id} active={is_active}")
        return await self.client.put(f"/admin/users/{user_id}/status", {"isActive": is_active})

    async def update_user_verification(self, user_id: str, is_verified: bool) -> Any:
        log.info(f"Setting user {user_id} verified={is_verified}")
        return await self.client.put(f"/admin/users/{user_id}/verify", {"isVerified": is_verified})

    async def make_user_admin(self, user_id: str, is_admin: bool = True) -> Any:
        log.info(f"Setting user {user_id} admin={is_admin}")
        return await self.client.put(f"/admin/users/{user_id}/make-admin", {"isAdmin": is_admin})

    async def reset_user_password(self, user_id: str, new_password: str) -> Any:
        return await self.client.put(f"/admin/users/{user_id}/reset-password", {"newPassword": new_password})

    async def update_user_details(self, user_id: str, details: Mapping[str, Any]) -> Any:
        return await self.client.put(f"/admin/users/{user_id}/details", dict(details))

    async def get_user_documents(self, user_id: str) -> Any:
        return await self.client.get(f"/admin/users/{user_id}/documents")

    async def upload_user_document(
        self,
        user_id: str,
        document_type: str,
        action: str,
        file: Optional[FileUpload] = None,
    ) -> Any:
        form = build_form_data({"documentType": document_type, "action": action}, "document", file)
        return await self.client.put(f"/admin/users/{user_id}/documents", data=form)

    # ---- Nominees ----

    async def get_user_nominees(self, user_id: str) -> Any:
        return await self.client.get(f"/admin/users/{user_id}/nominees")

    async def save_nominee(self, user_id: str, nominee: Mapping[str, Any]) -> Any:
        """Creates the nominee, or updates it when ``nominee`` carries an id."""
        return await self.client.post(f"/admin/users/{user_id}/nominees", dict(nominee))

    async def delete_nominee(self, user_id: str, nominee_id: str) -> Any:
        return await self.client.delete(f"/admin/users/{user_id}/nominees/{nominee_id}")

    async def upload_nominee_document(self, user_id: str, nominee_id: str, document_type: str, file: FileUpload) -> Any:
        form = build_form_data({"documentType": document_type, "action": "update"}, "document", file)
        return await self.client.put(f"/admin/users/{user_id}/nominees/{nominee_id}/documents", data=form)

    async def set_primary_nominee(self, user_id: str, nominee_id: str) -> Any:
        return await self.client.put(f"/admin/users/{user_id}/nominees/{nominee_id}/primary")

    # ---- Claims & donations ----

    async def get_claims(self, filters: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.client.get("/admin/claims", params=filters)

    async def verify_claim(self, claim_id: str, status: ClaimStatus, verification_notes: str = "") -> Any:
        status = ClaimStatus(status)
        log.info(f"Verifying claim {claim_id} as {status.value}")
        return await self.client.put(
            f"/admin/claims/{claim_id}/verify",
            {"status": status.value, "verificationNotes": verification_notes},
        )

    async def get_donations(self, filters: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.client.get("/admin/donations", params=filters)

    async def get_donation_queue(self) -> Any:
        return await self.client.get("/admin/donation-queue")

    # ---- Receipts & subscriptions ----

    async def get_pending_receipts(self) -> Any:
        return await self.client.get("/admin/receipts/pending")

    async def update_receipt_status(self, receipt_id: str, status: str, rejection_reason: str = "") -> Any:
        return await self.client.put(
            f"/admin/receipts/{receipt_id}/status",
            {"status": status, "rejectionReason": rejection_reason},
        )

    async def get_pending_subscriptions(self) -> Any:
        return await self.client.get("/admin/subscriptions/pending")

    async def verify_manual_subscription(self, subscription_id: str, status: str, rejection_reason: str = "") -> Any:
        return await self.client.put(
            f"/admin/subscriptions/{subscription_id}/verify",
            {"status": status, "rejectionReason": rejection_reason},
        )

    # ---- Donation caps ----

    async def get_donation_caps(self, month_year: Optional[str] = None) -> Any:
        return await self.client.get("/admin/donation-caps", params={"monthYear": month_year})

    async def update_donation_cap(self, claim_type: str, cap_amount: float, month_year: str) -> Any:
        if isinstance(claim_type, ClaimType):
            claim_type = claim_type.cap_code
        if claim_type not in CAP_CODES:
            raise ValueError(f"Unknown claim type for donation cap: {claim_type}")
        log.info(f"Setting {claim_type} donation cap for {month_year} to {cap_amount}")
        return await self.client.put(
            f"/admin/donation-caps/{claim_type}",
            {"capAmount": float(cap_amount), "monthYear": month_year},
        )

    async def get_donation_cap_history(self, filters: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.client.get("/admin/donation-caps/history", params=filters)

    # ---- System config & audit logs ----

    async def get_app_config(self) -> Any:
        return await self.client.get("/admin/config")

    async def update_app_config(self, key: str, value: Any) -> Any:
        log.info(f"Updating app config {key}")
        return await self.client.put(f"/admin/config/{key}", {"value": value})

    async def get_audit_logs(self, filters: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.client.get("/admin/logs", params=filters)

    # ---- Gallery ----

    async def upload_gallery_photo(self, fields: Mapping[str, Any], image: Optional[FileUpload] = None) -> Any:
        return await self.client.post("/admin/gallery", data=build_form_data(fields, UPLOAD_FIELD, image))

    async def get_gallery_photos(self, filters: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.client.get("/admin/gallery", params=filters)

    async def update_gallery_status(self, gallery_id: str, is_active: bool) -> Any:
        return await self.client.put(f"/admin/gallery/{gallery_id}/status", {"isActive": is_active})

    async def delete_gallery_photo(self, gallery_id: str) -> Any:
        return await self.client.delete(f"/admin/gallery/{gallery_id}")

    # ---- News & blogs ----

    async def create_news(self, fields: Mapping[str, Any], image: Optional[FileUpload] = None) -> Any:
        return await self.client.post("/admin/news", data=build_form_data(fields, UPLOAD_FIELD, image))

    async def get_news(self, filters: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.client.get("/admin/news", params=filters)

    async def update_news(self, news_id: str, fields: Mapping[str, Any], image: Optional[FileUpload] = None) -> Any:
        return await self.client.put(f"/admin/news/{news_id}", data=build_form_data(fields, UPLOAD_FIELD, image))

    async def delete_news(self, news_id: str) -> Any:
        return await self.client.delete(f"/admin/news/{news_id}")

    async def toggle_news_publish(self, news_id: str, is_published: bool) -> Any:
        return await self.client.put(f"/admin/news/{news_id}/publish", {"isPublished": is_published})

    # ---- Testimonials ----

    async def create_testimonial(self, fields: Mapping[str, Any], image: Optional[FileUpload] = None) -> Any:
        return await self.client.post("/admin/testimonials", data=build_form_data(fields, UPLOAD_FIELD, image))

    async def get_testimonials(self, filters: Optional[Mapping[str, Any]] = None) -> Any:
        return await self.client.get("/admin/testimonials", params=filters)

    async def update_testimonial(
        self, testimonial_id: str, fields: Mapping[str, Any], image: Optional[FileUpload] = None
    ) -> Any:
        return await self.client.put(
            f"/admin/testimonials/{testimonial_id}", data=build_form_data(fields, UPLOAD_FIELD, image)
        )

    async def delete_testimonial(self, testimonial_id: str) -> Any:
        return await self.client.delete(f"/admin/testimonials/{testimonial_id}")

    async def toggle_testimonial_status(self, testimonial_id: str, is_active: bool) -> Any:
        return await self.client.put(f"/admin/testimonials/{testimonial_id}/status", {"isActive": is_active})
