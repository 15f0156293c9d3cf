from string import Template

STYLESHEET = """\
body { font-family: sans-serif; font-size: 14px; line-height: 1.2; padding: 10px; color: #000; background: #fff; }
table { width: 100%; border-collapse: collapse; margin-top: 10px; }
th, td { border: 1px solid #ccc; padding: 4px; text-align: left; }
input, select, textarea { width: 100%; padding: 8px; margin: 4px 0; border: 1px solid #999; }
button, input[type="submit"] { background: #000; color: #fff; border: none; padding: 10px; width: 100%; }
.captcha-box { background: #eee; padding: 10px; text-align: center; font-weight: bold; }
.captcha-img { display: block; margin: 10px auto; max-width: 100%; border: 1px solid #ccc; background: #fff; }"""

DOCUMENT_TEMPLATE = Template(
    """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<style>
$stylesheet
</style>
</head>
<body><main>$content</main></body>
</html>"""
)


def assemble_document(content_html: str) -> str:
    """Wrap rewritten markup in the fixed document shell."""
    return DOCUMENT_TEMPLATE.substitute(stylesheet=STYLESHEET, content=content_html)
