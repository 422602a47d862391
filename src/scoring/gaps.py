"""
Content Gap Detection

Checks the fixed set of eight content elements AI assistants lean on when
describing or recommending a brand. The list is always complete and in a
fixed order, whatever the page contains.
"""

from typing import List

from src.models import Gap, Impact, PageFacts

FAQ_SECTION = "FAQ Section"
COMPARISON_PAGES = "Comparison Pages"
CUSTOMER_TESTIMONIALS = "Customer Testimonials"
PRICING_INFORMATION = "Pricing Information"
ABOUT_PAGE = "About Page"
BLOG_CONTENT = "Blog Content"
DOCUMENTATION = "Documentation"
USE_CASES = "Use Cases"


def detect_gaps(facts: PageFacts) -> List[Gap]:
    return [
        Gap(element=FAQ_SECTION, impact=Impact.HIGH, found=facts.has_faq),
        Gap(element=COMPARISON_PAGES, impact=Impact.HIGH, found=facts.has_comparisons),
        Gap(element=CUSTOMER_TESTIMONIALS, impact=Impact.MEDIUM, found=facts.has_testimonials),
        Gap(element=PRICING_INFORMATION, impact=Impact.MEDIUM, found=facts.has_pricing),
        Gap(element=ABOUT_PAGE, impact=Impact.LOW, found=facts.has_about),
        Gap(element=BLOG_CONTENT, impact=Impact.MEDIUM, found=facts.has_blog),
        Gap(element=DOCUMENTATION, impact=Impact.HIGH, found=facts.has_documentation),
        Gap(element=USE_CASES, impact=Impact.MEDIUM, found=facts.has_use_cases),
    ]


def missing_elements(gaps: List[Gap]) -> List[str]:
    return [gap.element for gap in gaps if not gap.found]


def found_elements(gaps: List[Gap]) -> List[str]:
    return [gap.element for gap in gaps if gap.found]
