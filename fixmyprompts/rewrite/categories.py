# fixmyprompts/rewrite/categories.py
from __future__ import annotations

from enum import Enum
from typing import Dict, Optional


class Category(str, Enum):
    GENERAL = "General"
    CREATIVE_WRITING = "Creative Writing"
    RESEARCH = "Research"
    PROBLEM_SOLVING = "Problem Solving"
    IMAGE_GENERATION = "Image Generation"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Category":
        """Total: anything unrecognised falls back to General."""
        key = (value or "").strip().lower()
        for cat in cls:
            if cat.value.lower() == key:
                return cat
        return _ALIASES.get(key, cls.GENERAL)


# Older extension builds sent the short label
_ALIASES: Dict[str, Category] = {
    "image gen": Category.IMAGE_GENERATION,
}


BASE_INSTRUCTIONS = """You are an expert prompt engineer. Your job is to take rough, unclear prompts and transform them into clear, specific, and effective prompts that will get better results from AI systems.

Guidelines:
- Be specific and detailed
- Add context and constraints where helpful
- Structure the prompt logically
- Include desired format/style when relevant
- Make it actionable and clear
- Preserve the original intent while enhancing clarity
- Limit the improved prompt to 500 characters maximum

Transform the user's input into a much better prompt:"""

CATEGORY_INSTRUCTIONS: Dict[Category, str] = {
    Category.GENERAL: (
        "Focus on clarity, specificity, and actionable instructions. Add context that would help "
        "any AI understand exactly what is needed. Ensure the response will be comprehensive and well-structured."
    ),
    Category.CREATIVE_WRITING: (
        "Enhance with specific genre, tone, length, audience, and style requirements. Include character "
        "details, setting, and narrative structure guidance. Encourage rich detail and vivid descriptions."
    ),
    Category.RESEARCH: (
        "Structure for comprehensive analysis including scope, methodology, sources, depth of analysis, and "
        "specific deliverables expected. Break down into clear sections covering current trends, historical "
        "context, and evidence-backed information."
    ),
    Category.PROBLEM_SOLVING: (
        "Frame with clear problem definition, constraints, desired outcome, step-by-step approach, and success "
        "criteria. Provide practical, solution-oriented guidance with actionable steps."
    ),
    Category.IMAGE_GENERATION: (
        "Add detailed visual descriptions including composition, lighting, style, mood, technical "
        "specifications, and artistic references. Specify image quality, camera settings, and visual elements clearly."
    ),
}


def instruction_for(category: Category) -> str:
    return CATEGORY_INSTRUCTIONS.get(category, CATEGORY_INSTRUCTIONS[Category.GENERAL])


def system_prompt(category: Category) -> str:
    return BASE_INSTRUCTIONS + "\n\n" + instruction_for(category)
