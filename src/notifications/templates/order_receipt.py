"""Order receipt template, emailed after a successful checkout."""


class OrderReceiptTemplate:
    subject = "Order has been placed"

    @staticmethod
    def render(context: dict) -> dict:
        number = context.get("number", "N/A")
        totals = context.get("totals") or {}
        currency = totals.get("currency", "USD")

        lines = []
        for item in context.get("items", []):
            unit = item.get("price", {}).get("total", 0)
            lines.append(f"  {item.get('quantity', 0)} x {item.get('name', item.get('id'))} @ {currency} {unit:.2f}")

        return {
            "subject": OrderReceiptTemplate.subject,
            "body": (
                f"Hi {context.get('customer', 'there')},\n\n"
                f"Your order {number} has been placed.\n\n"
                + "\n".join(lines)
                + "\n\n"
                f"Total: {currency} {totals.get('total', 0):.2f}\n"
                f"Tax: {currency} {totals.get('tax', 0):.2f}\n"
                f"Charge reference: {context.get('charge_id', 'N/A')}\n\n"
                "Thank you for ordering with us!"
            ),
        }
