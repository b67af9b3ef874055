import html
from typing import Any, Dict

EMAIL_VERIFY_EN = """
<p>Hi {username},</p>
<p>Thanks for joining ChenYifaer! Please confirm your email address by clicking the link below:</p>
<p><a href="{link}">{link}</a></p>
<p>The link expires in 1 hour. If you did not sign up, you can ignore this email.</p>
<p>&copy; {copyright} ChenYifaer</p>
"""

EMAIL_VERIFY_ZH = """
<p>{username}，你好：</p>
<p>感谢注册陈一发儿粉丝站！请点击下面的链接验证你的邮箱：</p>
<p><a href="{link}">{link}</a></p>
<p>链接将在 1 小时后失效。如果这不是你本人的操作，请忽略此邮件。</p>
<p>&copy; {copyright} 陈一发儿</p>
"""

TEMPLATES: Dict[str, str] = {
    "email-verify-en": EMAIL_VERIFY_EN,
    "email-verify-zh": EMAIL_VERIFY_ZH,
}


class UnknownTemplate(KeyError):
    pass


def render(template: str, context: Dict[str, Any]) -> str:
    """Fill a named template; context values are HTML-escaped."""
    try:
        source = TEMPLATES[template]
    except KeyError:
        raise UnknownTemplate(template) from None
    escaped = {key: html.escape(str(value)) for key, value in context.items()}
    return source.format_map(escaped)
