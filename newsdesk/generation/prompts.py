"""Marathi rewrite prompts."""

TITLE_CONTEXT_CHARS = 300

BODY_PROMPT = """तुम्ही मराठी न्यूज एडिटर आहात.

खालील संपूर्ण बातमी पुन्हा लिहा. मजकूर लांब, तपशीलवार आणि वाचनीय असावा.

नियम:
- मूळ मजकूर कॉपी करू नका - पूर्णपणे मूळ लिहा
- संपूर्ण बातमी पुन्हा लिहा (सारांश नाही)
- मूळ लांबी जवळजवळ कायम ठेवा किंवा थोडी वाढवा
- सर्व महत्त्वाची माहिती, पार्श्वभूमी आणि संदर्भ समाविष्ट करा
- साधी, स्पष्ट आणि प्रवाही मराठी वापरा
- मत मांडू नका, फक्त तथ्यांवर लक्ष द्या

शीर्षक: {title}
स्रोत: {source}
मूळ बातमी:
{content}

फक्त पुन्हा लिहिलेली संपूर्ण बातमी द्या."""

TITLE_PROMPT = """तुम्ही मराठी न्यूज हेडलाइन एडिटर आहात.

खालील बातमीचे शीर्षक पुन्हा लिहा.

नियम:
- मूळ शीर्षक कॉपी करू नका - पूर्णपणे नवीन लिहा
- 10-15 शब्दांत ठेवा
- मुख्य माहिती समाविष्ट करा
- आकर्षक पण क्लिकबेट नसलेले
- साधी स्पष्ट मराठी

मूळ शीर्षक: {title}
बातमी सारांश: {summary}

फक्त नवीन शीर्षक द्या, कोणतेही स्पष्टीकरण किंवा अवतरण चिन्ह नाही."""


def body_prompt(title: str, content: str, source: str) -> str:
    """Prompt for a full-length rewrite of the article body."""
    return BODY_PROMPT.format(title=title, source=source, content=content)


def title_prompt(title: str, content: str = "") -> str:
    """Prompt for a new headline."""
    return TITLE_PROMPT.format(title=title, summary=(content or "")[:TITLE_CONTEXT_CHARS])
