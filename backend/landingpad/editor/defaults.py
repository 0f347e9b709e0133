"""Default content for editor elements and website settings."""
import copy
from typing import Any, Dict

DEFAULT_SETTINGS: Dict[str, Any] = {
    "colors": {
        "primary": "#3B82F6",
        "secondary": "#1E293B",
        "accent": "#06B6D4",
        "background": "#F8FAFC",
        "text": "#0F172A",
    },
    "fonts": {
        "heading": "Inter",
        "body": "Inter",
    },
    "globalStyles": {
        "borderRadius": "0.5rem",
        "buttonStyle": "rounded",
    },
}

DEFAULT_PAGES = [
    {
        "id": "home",
        "name": "Home",
        "slug": "home",
        "isHome": True,
        "elements": [],
    }
]

_ELEMENT_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "hero": {
        "headline": "Welcome to Your Website",
        "subheadline": "A beautiful, professional website built with Landing Pad",
        "ctaText": "Get Started",
        "ctaLink": "#",
        "image": "/images/placeholders/hero-image.jpg",
        "alignment": "center",
    },
    "features": {
        "headline": "Features",
        "subheadline": "Why choose our products",
        "features": [
            {"title": "Feature 1", "description": "Description of feature 1", "icon": "star"},
            {"title": "Feature 2", "description": "Description of feature 2", "icon": "heart"},
            {"title": "Feature 3", "description": "Description of feature 3", "icon": "bolt"},
        ],
        "columns": 3,
    },
    "text": {
        "headline": "Section Title",
        "content": "<p>This is a text section. You can edit this content to add your own text.</p>",
        "alignment": "left",
    },
    "image": {
        "image": "/images/placeholders/image.jpg",
        "caption": "Image caption",
        "altText": "Description of the image",
        "size": "large",
    },
    "gallery": {
        "headline": "Gallery",
        "images": [
            {
                "url": f"/images/placeholders/gallery-{n}.jpg",
                "caption": f"Image {n}",
                "altText": f"Description of image {n}",
            }
            for n in (1, 2, 3)
        ],
        "layout": "grid",
        "columns": 3,
    },
    "testimonials": {
        "headline": "What Our Customers Say",
        "testimonials": [
            {
                "quote": "This product has changed how I work. Highly recommended!",
                "author": "Jane Doe",
                "role": "CEO, Company Inc.",
                "image": "/images/placeholders/avatar-1.jpg",
            },
            {
                "quote": "The best solution we have found in the market.",
                "author": "John Smith",
                "role": "Marketing Director",
                "image": "/images/placeholders/avatar-2.jpg",
            },
        ],
        "style": "cards",
    },
    "pricing": {
        "headline": "Pricing Plans",
        "subheadline": "Choose the plan that works for you",
        "plans": [
            {
                "name": "Basic",
                "price": "9",
                "period": "month",
                "description": "Perfect for starters",
                "features": [f"Feature {n}" for n in range(1, 4)],
                "cta": "Get Started",
                "ctaLink": "#",
                "highlighted": False,
            },
            {
                "name": "Pro",
                "price": "19",
                "period": "month",
                "description": "Most popular choice",
                "features": [f"Feature {n}" for n in range(1, 6)],
                "cta": "Get Started",
                "ctaLink": "#",
                "highlighted": True,
            },
            {
                "name": "Enterprise",
                "price": "49",
                "period": "month",
                "description": "For larger teams",
                "features": [f"Feature {n}" for n in range(1, 8)],
                "cta": "Contact Us",
                "ctaLink": "#",
                "highlighted": False,
            },
        ],
    },
    "contact": {
        "headline": "Contact Us",
        "subheadline": "Get in touch with our team",
        "email": "contact@example.com",
        "phone": "+1 (555) 123-4567",
        "address": "123 Main St, City, Country",
        "showForm": True,
        "formFields": [
            {"name": "name", "label": "Name", "type": "text", "required": True},
            {"name": "email", "label": "Email", "type": "email", "required": True},
            {"name": "message", "label": "Message", "type": "textarea", "required": True},
        ],
        "submitText": "Send Message",
    },
    "cta": {
        "headline": "Ready to get started?",
        "subheadline": "Join thousands of satisfied customers",
        "buttonText": "Get Started",
        "buttonLink": "#",
        "style": "centered",
    },
    "custom": {
        "html": '<div style="padding: 20px; text-align: center;">Custom HTML content goes here</div>',
    },
}


def get_default_content(element_type: str) -> Dict[str, Any]:
    """
    Return a fresh default content payload for an element type.

    Unknown types get an empty dict. The result is a new object on every
    call, so elements never share nested lists or dicts.
    """
    return copy.deepcopy(_ELEMENT_DEFAULTS.get(element_type, {}))


def default_settings() -> Dict[str, Any]:
    """Return a fresh copy of the default website settings."""
    return copy.deepcopy(DEFAULT_SETTINGS)


def default_pages() -> list:
    """Return the page list every new website starts with."""
    return copy.deepcopy(DEFAULT_PAGES)
