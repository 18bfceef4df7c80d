"""Services — platform detection and read-only inspection."""
