"""
UK household and financial product definitions.

Seed data for the product catalog. Bump CATALOG_VERSION whenever an
entry changes.
"""

from typing import Any

from renewals.core.entities.catalog import CatalogEntry

CATALOG_VERSION = "uk-2024.1"

UK_PRODUCTS: dict[str, dict[str, dict[str, Any]]] = {
    "Finance": {
        "Car Finance PCP": {
            "default_offsets": (120, 90, 60, 30, 14),
            "urgency_level": "important",
            "end_date_type": "hard_end",
            "requires_action": True,
            "regulatory_type": "fca_regulated",
            "notice_period": 30,
            "renewal_notes": "Consider buying, returning, or new PCP deal",
        },
        "Car Finance HP": {
            "default_offsets": (90, 60, 30, 14),
            "urgency_level": "important",
            "end_date_type": "hard_end",
            "requires_action": False,
            "regulatory_type": "fca_regulated",
            "renewal_notes": "Ownership transfers automatically on final payment",
        },
        "Personal Loan": {
            "default_offsets": (90, 60, 30),
            "urgency_level": "important",
            "end_date_type": "hard_end",
            "requires_action": False,
            "regulatory_type": "fca_regulated",
            "renewal_notes": "Loan completes automatically - no action required",
        },
        "Mortgage Fixed Rate": {
            "default_offsets": (180, 120, 90, 60, 30),
            "urgency_level": "strategic",
            "end_date_type": "review_date",
            "requires_action": True,
            "regulatory_type": "fca_regulated",
            "renewal_notes": "Review rates 6 months before end of fixed term",
        },
        "Credit Card Promotional Rate": {
            "default_offsets": (60, 30, 14, 7),
            "urgency_level": "important",
            "end_date_type": "review_date",
            "requires_action": True,
            "regulatory_type": "fca_regulated",
            "renewal_notes": "Standard rate applies after promotional period",
        },
        "Store Finance Deal": {
            "default_offsets": (60, 30, 14, 7),
            "urgency_level": "important",
            "end_date_type": "hard_end",
            "requires_action": True,
            "regulatory_type": "fca_regulated",
            "renewal_notes": "Interest may apply if not paid by end date",
        },
    },
    "Contracts": {
        "Mobile Contract": {
            "default_offsets": (90, 60, 30, 14),
            "urgency_level": "important",
            "end_date_type": "hard_end",
            "requires_action": True,
            "regulatory_type": "contractual",
            "notice_period": 30,
            "renewal_notes": "Contract may auto-renew or switch to monthly rolling",
        },
        "Broadband Contract": {
            "default_offsets": (90, 60, 30),
            "urgency_level": "important",
            "end_date_type": "hard_end",
            "requires_action": True,
            "regulatory_type": "contractual",
            "notice_period": 30,
            "renewal_notes": "May auto-renew at higher rate - compare deals",
        },
        "Energy Fixed Deal": {
            "default_offsets": (60, 30, 14, 7),
            "urgency_level": "important",
            "end_date_type": "review_date",
            "requires_action": True,
            "regulatory_type": "ofgem_regulated",
            "renewal_notes": "Switch before default tariff applies - use comparison sites",
        },
        "Tenancy Agreement": {
            "default_offsets": (60, 30, 14),
            "urgency_level": "critical",
            "end_date_type": "hard_end",
            "requires_action": True,
            "regulatory_type": "contractual",
            "notice_period": 30,
            "renewal_notes": "Give notice if not renewing - deposit implications",
        },
        "Gym Membership": {
            "default_offsets": (60, 30, 14),
            "urgency_level": "important",
            "end_date_type": "auto_renewal",
            "requires_action": True,
            "regulatory_type": "contractual",
            "notice_period": 30,
            "renewal_notes": "Usually auto-renews - give notice to cancel",
        },
        "TV Streaming Contract": {
            "default_offsets": (30, 14, 7),
            "urgency_level": "important",
            "end_date_type": "auto_renewal",
            "requires_action": False,
            "regulatory_type": "contractual",
            "renewal_notes": "Most streaming services auto-renew monthly",
        },
    },
    "Insurance": {
        "Car Insurance": {
            "default_offsets": (60, 30, 14, 7),
            "urgency_level": "critical",
            "end_date_type": "auto_renewal",
            "requires_action": True,
            "regulatory_type": "fca_regulated",
            "renewal_notes": "Compare prices before auto-renewal - legal requirement to have cover",
        },
        "Home Insurance": {
            "default_offsets": (60, 30, 14, 7),
            "urgency_level": "critical",
            "end_date_type": "auto_renewal",
            "requires_action": True,
            "regulatory_type": "fca_regulated",
            "renewal_notes": "Review cover levels and compare prices annually",
        },
        "Life Insurance": {
            "default_offsets": (60, 30, 14),
            "urgency_level": "important",
            "end_date_type": "auto_renewal",
            "requires_action": False,
            "regulatory_type": "fca_regulated",
            "renewal_notes": "Premiums may increase with age - review regularly",
        },
        "Income Protection": {
            "default_offsets": (60, 30, 14),
            "urgency_level": "important",
            "end_date_type": "auto_renewal",
            "requires_action": False,
            "regulatory_type": "fca_regulated",
            "renewal_notes": "Review benefit levels match current salary",
        },
        "Travel Insurance": {
            "default_offsets": (30, 14, 7),
            "urgency_level": "important",
            "end_date_type": "auto_renewal",
            "requires_action": False,
            "renewal_notes": "Annual policies often better value than single trip",
        },
        "Pet Insurance": {
            "default_offsets": (30, 14, 7),
            "urgency_level": "important",
            "end_date_type": "auto_renewal",
            "requires_action": False,
            "regulatory_type": "fca_regulated",
            "renewal_notes": "Pre-existing conditions excluded if you switch providers",
        },
        "Landlord Insurance": {
            "default_offsets": (60, 30, 14),
            "urgency_level": "important",
            "end_date_type": "auto_renewal",
            "requires_action": True,
            "regulatory_type": "fca_regulated",
            "renewal_notes": "Review rental income and property values annually",
        },
    },
    "Official": {
        "MOT Certificate": {
            "default_offsets": (30, 14, 7, 3, 1),
            "urgency_level": "critical",
            "end_date_type": "expiry_date",
            "requires_action": True,
            "regulatory_type": "government_required",
            "renewal_notes": "Legal requirement - book MOT test early",
        },
        "TV Licence": {
            "default_offsets": (30, 14, 7),
            "urgency_level": "critical",
            "end_date_type": "expiry_date",
            "requires_action": True,
            "regulatory_type": "government_required",
            "renewal_notes": "Required for live TV/BBC iPlayer",
        },
        "Driving Licence": {
            "default_offsets": (365, 180, 90, 30),
            "urgency_level": "critical",
            "end_date_type": "expiry_date",
            "requires_action": True,
            "regulatory_type": "government_required",
            "renewal_notes": "Cannot drive with expired licence - renew online via DVLA",
        },
        "Passport": {
            "default_offsets": (365, 180, 90),
            "urgency_level": "important",
            "end_date_type": "expiry_date",
            "requires_action": True,
            "regulatory_type": "government_required",
            "renewal_notes": "Some countries require 6+ months validity - renew early",
        },
        "Vehicle Tax VED": {
            "default_offsets": (14, 7, 3, 1),
            "urgency_level": "critical",
            "end_date_type": "expiry_date",
            "requires_action": True,
            "regulatory_type": "government_required",
            "renewal_notes": "Cannot drive on public roads without valid tax",
        },
        "Professional Licence": {
            "default_offsets": (90, 60, 30),
            "urgency_level": "critical",
            "end_date_type": "expiry_date",
            "requires_action": True,
            "regulatory_type": "government_required",
            "renewal_notes": "May require CPD evidence or examination",
        },
    },
    "Savings": {
        "Fixed Rate Bond": {
            "default_offsets": (60, 30, 14, 7),
            "urgency_level": "strategic",
            "end_date_type": "hard_end",
            "requires_action": True,
            "regulatory_type": "fca_regulated",
            "renewal_notes": "Compare rates before auto-renewal or withdrawal",
        },
        "ISA Annual Limit": {
            "default_offsets": (90, 60, 30, 14),
            "urgency_level": "strategic",
            "end_date_type": "review_date",
            "requires_action": False,
            "renewal_notes": "Use full allowance before April 5th - tax year end",
        },
        "Savings Bonus Rate": {
            "default_offsets": (30, 14, 7),
            "urgency_level": "strategic",
            "end_date_type": "review_date",
            "requires_action": True,
            "renewal_notes": "Rate may drop significantly after bonus period",
        },
        "Investment Term": {
            "default_offsets": (90, 60, 30),
            "urgency_level": "strategic",
            "end_date_type": "hard_end",
            "requires_action": True,
            "regulatory_type": "fca_regulated",
            "renewal_notes": "Review performance and consider alternatives",
        },
        "Premium Bonds Review": {
            "default_offsets": (365, 180),
            "urgency_level": "strategic",
            "end_date_type": "review_date",
            "requires_action": False,
            "renewal_notes": "Annual review of holdings vs other savings options",
        },
    },
    "Warranties": {
        "Appliance Extended Warranty": {
            "default_offsets": (90, 60, 30),
            "urgency_level": "important",
            "end_date_type": "auto_renewal",
            "requires_action": False,
            "renewal_notes": "Consider if still cost-effective vs replacement",
        },
        "Car Extended Warranty": {
            "default_offsets": (90, 60, 30, 14),
            "urgency_level": "important",
            "end_date_type": "hard_end",
            "requires_action": True,
            "renewal_notes": "Compare with independent warranty providers",
        },
        "Boiler Service Plan": {
            "default_offsets": (30, 14, 7),
            "urgency_level": "important",
            "end_date_type": "auto_renewal",
            "requires_action": False,
            "renewal_notes": "Annual service maintains warranty and safety",
        },
        "Home Emergency Cover": {
            "default_offsets": (30, 14, 7),
            "urgency_level": "important",
            "end_date_type": "auto_renewal",
            "requires_action": False,
            "renewal_notes": "Check what emergencies are covered",
        },
        "Breakdown Cover": {
            "default_offsets": (30, 14, 7),
            "urgency_level": "important",
            "end_date_type": "auto_renewal",
            "requires_action": False,
            "renewal_notes": "Compare AA, RAC and insurance provider options",
        },
    },
    "Professional": {
        "Professional Body Membership": {
            "default_offsets": (60, 30, 14),
            "urgency_level": "important",
            "end_date_type": "expiry_date",
            "requires_action": True,
            "renewal_notes": "Required for professional status and practice",
        },
        "Trade Union Membership": {
            "default_offsets": (30, 14),
            "urgency_level": "important",
            "end_date_type": "auto_renewal",
            "requires_action": False,
            "renewal_notes": "Provides workplace representation and legal support",
        },
        "Professional Qualification CPD": {
            "default_offsets": (90, 60, 30),
            "urgency_level": "important",
            "end_date_type": "expiry_date",
            "requires_action": True,
            "renewal_notes": "Complete CPD hours before deadline",
        },
        "Club Membership": {
            "default_offsets": (60, 30, 14),
            "urgency_level": "important",
            "end_date_type": "auto_renewal",
            "requires_action": False,
            "renewal_notes": "Consider usage vs membership costs",
        },
        "Certification Renewal": {
            "default_offsets": (90, 60, 30),
            "urgency_level": "important",
            "end_date_type": "expiry_date",
            "requires_action": True,
            "renewal_notes": "May require examination or assessment",
        },
    },
}


def build_entries() -> dict[str, CatalogEntry]:
    """Flatten the seed table into catalog entries keyed by product name."""
    entries: dict[str, CatalogEntry] = {}
    for category, products in UK_PRODUCTS.items():
        for name, definition in products.items():
            entries[name] = CatalogEntry(name=name, category=category, **definition)
    return entries
