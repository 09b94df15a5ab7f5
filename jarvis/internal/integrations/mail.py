import smtplib
from asyncio import to_thread
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid

from jarvis.config import Config
from jarvis.internal.log import factory_logger

log_mail = factory_logger('mail', file=True)


class MailException(Exception):
    def __init__(self, *, recipients: list[str] | None = None, subject: str | None = None, msg: str | None = None):
        self.recipients = recipients or []
        self.subject = subject
        self.msg = msg
        super().__init__(msg)

    def __str__(self):
        _str = f'\nmsg: {self.msg}' if self.msg else ''
        _str += f'\nsubject: {self.subject}' if self.subject else ''
        _str += f'\nrecipients: {", ".join(self.recipients)}' if self.recipients else ''
        return _str


class MailClient:
    """SMTP transport with STARTTLS and login, e.g. Gmail with an app password."""

    def __init__(
        self,
        host: str = Config.mail_host,
        port: int = Config.mail_port,
        user: str = Config.mail_user,
        password: str = Config.mail_password,
        from_name: str = Config.mail_from_name,
        timeout: int = 30,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.from_name = from_name
        self.timeout = timeout

    def build_message(self, recipients: list[str], subject: str, html: str) -> MIMEMultipart:
        message = MIMEMultipart('alternative')
        message['From'] = formataddr((self.from_name, self.user))
        message['To'] = ', '.join(recipients)
        message['Subject'] = subject
        message['Message-ID'] = make_msgid()
        message.attach(MIMEText(html, 'html', 'utf-8'))
        return message

    def _send(self, message: MIMEMultipart, recipients: list[str]):
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            server.starttls()
            server.login(self.user, self.password)
            server.send_message(message, from_addr=self.user, to_addrs=recipients)

    async def send(self, recipients: list[str], subject: str, html: str) -> str:
        """Sends the html message and returns its Message-ID. smtplib blocks, so it runs in a thread."""
        if not recipients:
            raise MailException(subject=subject, msg='No recipients')
        if not self.user or not self.password:
            raise MailException(recipients=recipients, subject=subject, msg='EMAIL or PASSWORD not configured')

        message = self.build_message(recipients, subject, html)
        try:
            await to_thread(self._send, message, recipients)
        except (smtplib.SMTPException, OSError) as e:
            exception = MailException(recipients=recipients, subject=subject, msg=f'{type(e).__name__}: {e}')
            log_mail.error(str(exception))
            raise exception

        log_mail.info(f'Mail sent {message["Message-ID"]}: {subject}')
        return message['Message-ID']
