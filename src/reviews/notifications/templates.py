"""Email templates for account and review notifications.

Each template renders a subject and plain-text body from a context dict.
"""


class EmailVerificationTemplate:
    name = "email_verification"

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "subject": "Verify Your Email - Clear Window",
            "body": (
                f"Hi {context['username']},\n\n"
                "Thank you for signing up! Please verify your email address to "
                "start submitting verified reviews:\n\n"
                f"{context['verification_url']}\n\n"
                f"This link will expire in {context['ttl_hours']} hours.\n\n"
                "If you didn't create an account with Clear Window, please ignore this email."
            ),
        }


class WelcomeTemplate:
    name = "welcome"

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "subject": "Welcome to Clear Window!",
            "body": (
                f"Hi {context['username']},\n\n"
                "Your email is verified. You can now submit reviews of the "
                "properties you have rented.\n\n"
                "Transparent reviews. Verified truth."
            ),
        }


class ReviewSubmittedTemplate:
    name = "review_submitted"

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "subject": "Review Submitted for Verification - Clear Window",
            "body": (
                f"Hi {context['username']},\n\n"
                f"Your review of {context['property_name']} has been received and "
                "is pending verification by our moderators.\n\n"
                "Your supporting documents are only used for verification and are "
                "deleted once the review has been moderated. Published reviews "
                "never show your identity."
            ),
        }


class ReviewPublishedTemplate:
    name = "review_published"

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "subject": "Your review has been published - Clear Window",
            "body": (
                f"Hi {context['username']},\n\n"
                f"Your review of {context['property_name']} has been verified and "
                "is now publicly visible, anonymized.\n\n"
                "Thank you for helping other renters."
            ),
        }


class ReviewRejectedTemplate:
    name = "review_rejected"

    @staticmethod
    def render(context: dict) -> dict:
        return {
            "subject": "Your review could not be published - Clear Window",
            "body": (
                f"Hi {context['username']},\n\n"
                f"Your review of {context['property_name']} was not approved.\n\n"
                f"Reason: {context['reason']}"
            ),
        }


TEMPLATE_REGISTRY: dict[str, type] = {
    template.name: template
    for template in (
        EmailVerificationTemplate,
        WelcomeTemplate,
        ReviewSubmittedTemplate,
        ReviewPublishedTemplate,
        ReviewRejectedTemplate,
    )
}


def get_template(name: str):
    """Look up a template class by name."""
    template_cls = TEMPLATE_REGISTRY.get(name)
    if template_cls is None:
        raise ValueError(f"No template registered for notification: {name}")
    return template_cls
