from typing import List

from .graph_api import GraphAPI


class MailAPI(GraphAPI):
    def send_mail(self, sender: str, recipients: List[str], subject: str, html_body: str,
                  save_to_sent_items: bool = True) -> None:
        """
        Sends an HTML email from a mailbox the app registration may send as.

        Args:
            sender: Mailbox (UPN or ID) to send from.
            recipients: Recipient email addresses.
            subject: Message subject.
            html_body: HTML message body.
            save_to_sent_items: Keep a copy in the sender's Sent Items.
        """
        message = {
            "message": {
                "subject": subject,
                "body": {"contentType": "HTML", "content": html_body},
                "toRecipients": [{"emailAddress": {"address": address}} for address in recipients],
            },
            "saveToSentItems": save_to_sent_items,
        }
        self.post(f"users/{sender}/sendMail", message)
