"""Default prompt templates for single-article summaries.

Placeholders: {subject}, {article_context}, {language}.
"""

OUTPUT_FORMAT_INSTRUCTION = """\
# Summary instructions

You write *only* a summary and discussion points for one {subject} story,
in {language}.

**Output format:**
A concise summary that captures the core of the story
(2-3 sentences, at most 150 characters).

**Only when comments are provided, add:**
After a blank line, a section titled "Main discussion points:" with 1-2
bullets taken from representative comments (one sentence each, at most
75 characters per bullet).

**Markdown:**
- Bold: `*text*`
- Italic: `_text_` (only when needed)
- Lists: start each line with `•`

**Example:**
New technology X takes a novel approach to a long-standing problem and is
drawing attention for its performance. Early reviews are mostly positive.

*Main discussion points:*
• Many commenters think this could be a real game changer.
• Others raise security concerns and doubts about compatibility.
"""

MAIN_PROMPT_TEMPLATE = """\
Analyse the following {subject} story.

{article_context}

Following the "Summary instructions" above, write only the summary and the
discussion points.

Guidelines:
- *Summary:* 2-3 sentences, at most 150 characters.
- *Discussion points:* based on the "Top comments" section, 1-2 bullets of
  at most 75 characters each. Omit this section when there are no comments.
- *Language:* write everything in {language}.
- *Format:* output the summary text only. No headers, greetings,
  preambles or closing remarks.
"""
