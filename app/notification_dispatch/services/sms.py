"""SMS channel service."""

from typing import List, Mapping, Optional

from notification_dispatch.cancellation import CancelToken
from notification_dispatch.errors import ErrorCode, NotificationError
from notification_dispatch.infrastructure.logging import bind_request_context
from notification_dispatch.models import (
    BulkSMSRequest,
    CountryInfo,
    Notification,
    NotificationResponse,
    NotificationType,
    RenderedSMSTemplate,
    SMSCostEstimate,
    SMSPayload,
    SMSRequest,
    new_id,
)
from notification_dispatch.providers.base import SMSProvider
from notification_dispatch.providers.capabilities import CountryCatalog
from notification_dispatch.segments import calculate_segments, max_message_length
from notification_dispatch.services.base import (
    ChannelService,
    has_content,
    parse_priority,
    require_content,
)


class SMSService(ChannelService[SMSProvider]):
    """Sends single and bulk SMS and answers cost questions.

    Example:
        service = SMSService(get_settings().sms)
        service.send_sms(
            SMSRequest(phone_number="1234567890", country_code="US", message="Hi")
        )
    """

    channel = NotificationType.SMS

    def send_sms(
        self, request: Optional[SMSRequest], cancel: Optional[CancelToken] = None
    ) -> NotificationResponse:
        """Validate, render and send one SMS.

        Raises:
            NotificationError: VALIDATION_FAILED for a malformed request,
                TEMPLATE_NOT_FOUND for an unknown template, or the provider's
                error unchanged.
        """
        if request is None:
            raise NotificationError.validation("request", "SMS request is required")

        log = self._logger.bind(
            country_code=request.country_code, template_id=request.template_id
        )
        try:
            self._validate_request(request)
        except NotificationError as err:
            log.warning("sms_validation_failed", error=str(err))
            raise

        self._provider.check_health(cancel)

        message = request.message
        unicode = request.unicode
        if request.template_id:
            rendered = self._render(request.template_id, request.template_data)
            message = rendered.message
            unicode = unicode or rendered.unicode
            require_content(
                "message",
                message,
                f"template {request.template_id} rendered an empty message",
            )

        metadata = dict(request.metadata)
        if request.country_code:
            metadata["country_code"] = request.country_code

        notification = Notification(
            type=NotificationType.SMS,
            priority=parse_priority(request.priority),
            recipient=request.phone_number,
            body=message,
            metadata=metadata,
            payload=SMSPayload(
                phone_number=request.phone_number,
                country_code=request.country_code,
                message=message,
                unicode=unicode,
            ),
        )

        log.debug("sms_dispatching", notification_id=notification.id)
        response = self._provider.send_sms(notification, cancel)
        log.info("sms_sent", notification_id=notification.id)
        return response

    def send_bulk_sms(
        self, request: BulkSMSRequest, cancel: Optional[CancelToken] = None
    ) -> List[NotificationResponse]:
        """Send one SMS per recipient, sequentially.

        A failing recipient yields a FAILED response in its position instead
        of aborting the batch. Recipient ``data`` overrides the request's
        ``template_data``.
        """
        if not request.recipients:
            raise NotificationError.validation(
                "recipients", "at least one recipient is required"
            )

        responses: List[NotificationResponse] = []
        with bind_request_context(batch_id=new_id(), channel=self.channel.value):
            self._logger.info("bulk_sms_started", total=len(request.recipients))
            for recipient in request.recipients:
                single = SMSRequest(
                    phone_number=recipient.phone_number,
                    country_code=recipient.country_code,
                    message=request.message,
                    unicode=request.unicode,
                    template_id=request.template_id,
                    template_data={**request.template_data, **recipient.data},
                    priority=request.priority,
                    metadata=dict(request.metadata),
                )
                try:
                    responses.append(self.send_sms(single, cancel))
                except NotificationError as err:
                    self._logger.warning(
                        "bulk_sms_recipient_failed",
                        phone_number=recipient.phone_number,
                        error=str(err),
                    )
                    responses.append(
                        self._failed_response(
                            err, f"Failed to send SMS to {recipient.phone_number}"
                        )
                    )

            failed = sum(1 for response in responses if not response.is_success)
            self._logger.info("bulk_sms_completed", total=len(responses), failed=failed)
        return responses

    def get_sms_cost(self, country_code: str) -> float:
        return self._provider.get_sms_cost(country_code)

    def estimate_cost(
        self, message: str, country_code: str = "", unicode: bool = False
    ) -> SMSCostEstimate:
        """Segments and cost of ``message`` without sending it.

        Raises:
            NotificationError: NOT_FOUND for a country without a rate.
        """
        segments = calculate_segments(message, unicode)
        cost_per_segment = self._provider.get_sms_cost(country_code)
        return SMSCostEstimate(
            segments=segments,
            cost_per_segment=cost_per_segment,
            total_cost=segments * cost_per_segment,
            unicode=unicode,
            country_code=country_code,
            message_length=len(message),
        )

    def get_supported_countries(self) -> List[CountryInfo]:
        if not isinstance(self._provider, CountryCatalog):
            raise NotificationError(
                ErrorCode.PROVIDER_NOT_FOUND,
                "country listing not supported by this provider",
                metadata={"provider": self._provider.name},
            )
        return self._provider.get_supported_countries()

    def render_template(
        self, template_id: str, data: Mapping[str, str]
    ) -> RenderedSMSTemplate:
        rendered = self._render(template_id, data)
        return RenderedSMSTemplate(
            id=rendered.id,
            message=rendered.message,
            max_length=rendered.max_length,
            unicode=rendered.unicode,
            segments=calculate_segments(rendered.message, rendered.unicode),
        )

    def validate_phone_number(self, phone_number: str, country_code: str = "") -> None:
        self._provider.validate_phone_number(phone_number, country_code)

    def _validate_request(self, request: SMSRequest) -> None:
        if not request.phone_number:
            raise NotificationError.validation(
                "phone_number", "phone number is required"
            )
        self._provider.validate_phone_number(request.phone_number, request.country_code)

        if not request.template_id and not has_content(request.message):
            raise NotificationError.validation(
                "message", "SMS message is required when not using a template"
            )

        limit = max_message_length(request.unicode)
        if len(request.message) > limit:
            raise NotificationError.validation(
                "message", f"message too long (max {limit} characters for 10 segments)"
            )
