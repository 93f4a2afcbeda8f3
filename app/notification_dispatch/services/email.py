"""Email channel service."""

from typing import List, Mapping, Optional

from notification_dispatch.cancellation import CancelToken
from notification_dispatch.errors import NotificationError
from notification_dispatch.infrastructure.configuration import DEFAULT_SENDER
from notification_dispatch.infrastructure.logging import bind_request_context
from notification_dispatch.models import (
    BulkEmailRequest,
    EmailPayload,
    EmailRequest,
    EmailTemplateInfo,
    Notification,
    NotificationResponse,
    NotificationType,
    RenderedTemplate,
    new_id,
)
from notification_dispatch.providers.base import EmailProvider
from notification_dispatch.services.base import (
    ChannelService,
    has_content,
    parse_priority,
    require_content,
)
from notification_dispatch.validation import is_valid_email_address


class EmailService(ChannelService[EmailProvider]):
    """Sends single and bulk emails through the configured provider.

    Example:
        service = EmailService(get_settings().email)
        response = service.send_email(
            EmailRequest(to=["user@example.com"], subject="Hi", text_body="Hello")
        )
    """

    channel = NotificationType.EMAIL

    @property
    def default_sender(self) -> str:
        return self._config.settings.get("default_sender") or DEFAULT_SENDER

    def send_email(
        self, request: Optional[EmailRequest], cancel: Optional[CancelToken] = None
    ) -> NotificationResponse:
        """Validate, render and send one email.

        Args:
            request: The email to send. ``template_id`` replaces subject and
                bodies with the rendered template.
            cancel: Optional cancellation signal.

        Returns:
            The provider's response.

        Raises:
            NotificationError: VALIDATION_FAILED for a malformed request,
                TEMPLATE_NOT_FOUND for an unknown template, or the provider's
                error unchanged.
        """
        if request is None:
            raise NotificationError.validation("request", "email request is required")

        log = self._logger.bind(
            recipients=len(request.to), template_id=request.template_id
        )
        try:
            self._validate_request(request)
        except NotificationError as err:
            log.warning("email_validation_failed", error=str(err))
            raise

        self._provider.check_health(cancel)

        subject = request.subject
        html_body = request.html_body
        text_body = request.text_body
        if request.template_id:
            rendered = self._render(request.template_id, request.template_data)
            subject = rendered.subject
            html_body = rendered.html_body
            text_body = rendered.text_body
            require_content(
                "subject",
                subject,
                f"template {request.template_id} rendered an empty subject",
            )

        body = text_body if has_content(text_body) else html_body
        require_content("body", body, "email must have either HTML body or text body")

        notification = Notification(
            type=NotificationType.EMAIL,
            priority=parse_priority(request.priority),
            recipient=request.to[0],
            subject=subject,
            body=body,
            metadata=dict(request.metadata),
            payload=EmailPayload(
                to=list(request.to),
                cc=list(request.cc),
                bcc=list(request.bcc),
                from_address=request.from_address or self.default_sender,
                reply_to=request.reply_to,
                html_body=html_body,
                text_body=text_body,
                attachments=list(request.attachments),
                headers=dict(request.headers),
            ),
        )

        log.debug("email_dispatching", notification_id=notification.id)
        response = self._provider.send_email(notification, cancel)
        log.info("email_sent", notification_id=notification.id)
        return response

    def send_bulk_email(
        self, request: BulkEmailRequest, cancel: Optional[CancelToken] = None
    ) -> List[NotificationResponse]:
        """Send one email per recipient, sequentially.

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
            self._logger.info("bulk_email_started", total=len(request.recipients))
            for recipient in request.recipients:
                single = EmailRequest(
                    to=[recipient.email],
                    from_address=request.from_address,
                    reply_to=request.reply_to,
                    subject=request.subject,
                    html_body=request.html_body,
                    text_body=request.text_body,
                    headers=dict(request.headers),
                    template_id=request.template_id,
                    template_data={**request.template_data, **recipient.data},
                    priority=request.priority,
                    metadata=dict(request.metadata),
                )
                try:
                    responses.append(self.send_email(single, cancel))
                except NotificationError as err:
                    self._logger.warning(
                        "bulk_email_recipient_failed",
                        recipient=recipient.email,
                        error=str(err),
                    )
                    responses.append(
                        self._failed_response(
                            err, f"Failed to send email to {recipient.email}"
                        )
                    )

            failed = sum(1 for response in responses if not response.is_success)
            self._logger.info(
                "bulk_email_completed", total=len(responses), failed=failed
            )
        return responses

    def get_email_templates(self) -> List[EmailTemplateInfo]:
        return self._provider.get_email_templates()

    def render_template(
        self, template_id: str, data: Mapping[str, str]
    ) -> RenderedTemplate:
        rendered = self._render(template_id, data)
        return RenderedTemplate(
            id=rendered.id,
            subject=rendered.subject,
            html_body=rendered.html_body,
            text_body=rendered.text_body,
        )

    def validate_email_address(self, email: str) -> None:
        self._provider.validate_email_address(email)

    def _validate_request(self, request: EmailRequest) -> None:
        if not request.to:
            raise NotificationError.validation(
                "to", "at least one recipient is required"
            )

        for field, addresses in (
            ("to", request.to),
            ("cc", request.cc),
            ("bcc", request.bcc),
        ):
            for address in addresses:
                if not is_valid_email_address(address):
                    raise NotificationError.validation(
                        field, f"invalid email address: {address}"
                    )

        if request.from_address and not is_valid_email_address(request.from_address):
            raise NotificationError.validation(
                "from_address", "invalid sender email address"
            )
        if request.reply_to and not is_valid_email_address(request.reply_to):
            raise NotificationError.validation(
                "reply_to", "invalid reply-to email address"
            )

        if not request.template_id:
            require_content(
                "subject",
                request.subject,
                "email subject is required when not using a template",
            )
            if not has_content(request.html_body) and not has_content(
                request.text_body
            ):
                raise NotificationError.validation(
                    "body", "email must have either HTML body, text body, or template"
                )
