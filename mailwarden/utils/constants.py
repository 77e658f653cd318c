"""
MailWarden Constants - Central location for ALL constant values.

Keyword vocabularies, confidence values and the signal weight table live here
so the strategies and the aggregation algorithm stay free of tuning literals.
"""

from typing import Dict, List, Tuple

# APPLICATION INFO
APP_NAME: str = "MailWarden"
APP_VERSION: str = "1.0.0"
APP_DESCRIPTION: str = "Heuristic detection of executive impersonation, invoice fraud and payroll phishing"

# MESSAGE LIMITS
MAX_BODY_PREVIEW_LENGTH: int = 500

# HEADER NAMES (keys are matched case-sensitively)
HEADER_RECEIVED_SPF: str = "Received-SPF"
HEADER_AUTHENTICATION_RESULTS: str = "Authentication-Results"
HEADER_REPLY_TO: str = "Reply-To"

# RISK SCORING
# Lower bound of each level; a score belongs to the first level it reaches.
RISK_THRESHOLDS: List[Tuple[str, float]] = [
    ("critical", 0.85),
    ("high", 0.70),
    ("medium", 0.50),
    ("low", 0.30),
]

HIGH_RISK_LEVELS: Tuple[str, ...] = ("high", "critical")

DEFAULT_SIGNAL_WEIGHT: float = 1.0

# Per signal type multiplier applied to a signal's confidence before taking the maximum
SIGNAL_WEIGHTS: Dict[str, float] = {
    "DOMAIN_TYPOSQUATTING": 1.5,
    "DISPLAY_NAME_MISMATCH": 1.3,
    "AUTH_FAILURES": 1.2,
    "HIGH_RISK_ATTACHMENT": 1.5,
    "SUSPICIOUS_ATTACHMENT_NAME": 1.3,
    "URGENCY_FINANCIAL_LANGUAGE": 1.0,
    "REPLY_TO_MISMATCH": 1.1,
    "MEDIUM_RISK_ATTACHMENT_WITH_URGENCY": 1.0,
    "BEC_CSUITE_TARGETING": 1.6,
    "BEC_FINANCE_TARGETING": 1.5,
    "BEC_HR_PAYROLL_SCAM": 1.4,  # legacy tables key this as BEC_HR_W2_SCAM, which leaves it at 1.0 (high, not critical)
    "BEC_HIGH_VALUE_TARGET": 1.2,
}

# DEFAULT DETECTION CONTEXT
DEFAULT_INTERNAL_DOMAINS: List[str] = ["company.com", "example.com"]
DEFAULT_TRUSTED_DOMAINS: List[str] = ["microsoft.com", "google.com", "paypal.com"]

# DOMAIN LISTS
FREEMAIL_DOMAINS: List[str] = [
    "gmail.com", "yahoo.com", "hotmail.com", "outlook.com", "aol.com",
]

# ============================================================================
# Display name impersonation
# ============================================================================

EXECUTIVE_TITLES: List[str] = [
    "ceo", "cfo", "president", "director", "chief", "vp", "vice president",
]

DISPLAY_NAME_CONFIDENCE: float = 0.85

# ============================================================================
# Typosquatting
# ============================================================================

# Percent similarity, both bounds exclusive
TYPOSQUATTING_MIN_SIMILARITY: float = 85.0
TYPOSQUATTING_MAX_SIMILARITY: float = 100.0
TYPOSQUATTING_CONFIDENCE: float = 0.90

# ============================================================================
# Authentication failures
# ============================================================================

AUTH_FAILURE_MIN_COUNT: int = 2
AUTH_FAILURES_CONFIDENCE: float = 0.80

# ============================================================================
# Reply-To mismatch
# ============================================================================

REPLY_TO_CONFIDENCE: float = 0.75

# ============================================================================
# Attachments
# ============================================================================

HIGH_RISK_EXTENSIONS: List[str] = [
    ".exe", ".scr", ".bat", ".cmd", ".com", ".pif",
    ".vbs", ".js", ".jar", ".msi", ".app",
]

MEDIUM_RISK_EXTENSIONS: List[str] = [
    ".doc", ".xls", ".xlsm", ".docm", ".pptm",
]

ATTACHMENT_URGENCY_KEYWORDS: List[str] = [
    "urgent", "immediately", "asap", "right away", "today",
]

HIGH_RISK_ATTACHMENT_CONFIDENCE: float = 0.90
SUSPICIOUS_ATTACHMENT_NAME_CONFIDENCE: float = 0.85
MEDIUM_RISK_ATTACHMENT_CONFIDENCE: float = 0.70

# ============================================================================
# Urgency + financial language
# ============================================================================

URGENCY_KEYWORDS: List[str] = [
    "urgent", "immediately", "asap", "right away", "time sensitive",
    "today", "end of day", "eod", "quick", "need this now", "hurry",
]

FINANCIAL_KEYWORDS: List[str] = [
    "wire transfer", "payment", "invoice", "bank account", "routing number",
    "swift", "ach", "wire", "fund", "transfer", "pay", "urgent payment",
    "gift card", "itunes", "google play", "prepaid card",
]

AUTHORITY_KEYWORDS: List[str] = [
    "ceo", "president", "director", "approved", "authorized", "confidential",
    "do not discuss", "between us", "sensitive", "private",
]

URGENCY_WEIGHT: float = 0.3
FINANCIAL_WEIGHT: float = 0.5
AUTHORITY_WEIGHT: float = 0.2

LANGUAGE_SCORE_THRESHOLD: float = 1.5
LANGUAGE_BASE_CONFIDENCE: float = 0.70
LANGUAGE_CONFIDENCE_SLOPE: float = 0.1
LANGUAGE_MAX_CONFIDENCE: float = 0.95

# ============================================================================
# BEC role targeting (English + French)
# ============================================================================

CSUITE_ROLES: List[str] = [
    "ceo", "cfo", "cto", "coo", "president", "chief", "vice president", "vp",
    "pdg", "président directeur général", "directeur général", "dg",
    "daf", "directeur administratif et financier", "directeur financier",
    "dsi", "directeur des systèmes d'information",
    "directeur", "direction générale",
]

FINANCE_ROLES: List[str] = [
    "finance", "accounting", "treasurer", "controller", "payroll",
    "comptabilité", "comptable", "trésorier", "trésorerie",
    "contrôleur de gestion", "contrôleur financier",
    "responsable financier", "responsable comptable",
    "service comptable", "paie",
]

HR_ROLES: List[str] = [
    "hr", "human resources", "recruiting", "talent",
    "drh", "directeur des ressources humaines", "ressources humaines",
    "rh", "responsable rh", "responsable ressources humaines",
    "recrutement", "gestionnaire paie", "service rh",
]

BEC_URGENCY_KEYWORDS: List[str] = [
    "urgent", "immediately", "asap", "today", "right away", "now",
    "immédiatement", "rapidement", "aujourd'hui",
    "tout de suite", "au plus vite", "dans l'immédiat",
    "sans délai", "prioritaire", "en urgence",
]

BEC_WIRE_TRANSFER_KEYWORDS: List[str] = [
    "wire transfer", "payment", "invoice", "bank account", "routing", "iban", "swift",
    "virement", "virement bancaire", "paiement", "facture",
    "compte bancaire", "rib", "relevé d'identité bancaire",
    "bic", "coordonnées bancaires",
    "ordre de virement", "transfert de fonds",
]

BEC_PAYROLL_KEYWORDS: List[str] = [
    "tax form", "payroll",
    "bulletin de paie", "bulletin de salaire", "fiche de paie",
    "numéro de sécurité sociale", "n° sécurité sociale",
    "cotisations sociales", "déclaration de revenus",
    "dsn", "déclaration sociale nominative",
    "attestation fiscale", "salaires",
]

BEC_CSUITE_CONFIDENCE: float = 0.90
BEC_FINANCE_CONFIDENCE: float = 0.85
BEC_HR_PAYROLL_CONFIDENCE: float = 0.80
BEC_HIGH_VALUE_CONFIDENCE: float = 0.70
