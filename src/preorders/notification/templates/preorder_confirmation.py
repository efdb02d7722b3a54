"""Preorder confirmation template — sent once after a preorder is submitted."""

from html import escape

SUBJECT = "Thank you for your preorder"

_PARAGRAPHS = (
    "We have received your preorder and wanted to personally thank you for the early support.",
    "We are currently finalizing vendor sourcing and production details to ensure quality and "
    "consistency before fulfillment begins. Your preorder secures your place in the first production run.",
    "We will follow up with updates as sourcing is completed and timelines are confirmed. "
    "No action is needed from you in the meantime.",
)

_HTML = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>{subject}</title>
  </head>
  <body style="margin: 0; padding: 0; background-color: #05060a; color: #e7ecff;">
    <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="background-color: #05060a;">
      <tr>
        <td align="center" style="padding: 32px 16px;">
          <table role="presentation" width="600" cellspacing="0" cellpadding="0"
                 style="width: 600px; max-width: 600px; background-color: #0b0f1c;
                        border: 1px solid #1b2233; border-radius: 16px;">
            <tr>
              <td style="padding: 28px 32px; border-bottom: 1px solid #1b2233;">
                <div style="font-size: 11px; letter-spacing: 0.35em; text-transform: uppercase; color: #9db4ff;">
                  {store_name}
                </div>
                <div style="font-size: 26px; font-weight: 600; margin-top: 8px; color: #f8fbff;">
                  {subject}
                </div>
              </td>
            </tr>
            <tr>
              <td style="padding: 28px 32px; font-size: 15px; line-height: 1.6; color: #c9d4ff;">
{paragraphs}
                <p style="margin: 0 0 8px 0; font-size: 12px; color: #9aa6d8;">
                  If you have any questions, simply reply to this email.
                </p>
              </td>
            </tr>
          </table>
        </td>
      </tr>
    </table>
  </body>
</html>
"""


class PreorderConfirmationTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        store_name = context.get("store_name", "")
        paragraphs = "\n".join(f'                <p style="margin: 0 0 16px 0;">{p}</p>' for p in _PARAGRAPHS)
        body = "\n\n".join(_PARAGRAPHS) + f"\n\nIf you have any questions, simply reply to this email.\n-- {store_name}"

        return {
            "subject": SUBJECT,
            "body": body,
            "html_body": _HTML.format(
                subject=SUBJECT,
                store_name=escape(store_name),
                paragraphs=paragraphs,
            ),
        }
