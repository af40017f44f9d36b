from typing import List, Union

from swiftmt.exceptions import MessageParseError
from swiftmt.models import MT101Page, ValidationReport
from swiftmt.parser import MT101PageReader


class Validator:
    """
    Pre-validation engine reporting structural problems of MT101 text as a
    list of messages instead of raising.
    """

    @staticmethod
    def _format_error(error: MessageParseError) -> str:
        if error.line_number is None:
            return error.message
        return f"Line {error.line_number}: {error.message}"

    @staticmethod
    def validate_text(raw_data: Union[str, bytes], lenient: bool = False) -> ValidationReport:
        """
        Reads every page of the raw text and reports the first parse failure.

        The reader cannot resynchronise after a broken page, so at most one
        error is reported. Pages before it are counted as valid.
        """
        errors: List[str] = []
        pages = 0
        try:
            reader = MT101PageReader(raw_data, lenient=lenient)
            while reader.read() is not None:
                pages += 1
        except MessageParseError as e:
            errors.append(Validator._format_error(e))

        if not errors and pages == 0:
            errors.append("No MT101 page found in message text.")

        return ValidationReport(is_valid=not errors, errors=errors)

    @staticmethod
    def validate(page: MT101Page) -> ValidationReport:
        """
        Checks that a page renders into text that reads back into an equal
        page. Pages built by hand may hold values their field notation rejects.
        """
        errors: List[str] = []
        try:
            content = page.get_content()
        except MessageParseError as e:
            return ValidationReport(is_valid=False, errors=[f"[Render] {e.message}"])

        try:
            reread = MT101PageReader(content).read()
        except MessageParseError as e:
            return ValidationReport(is_valid=False, errors=[f"[Re-read] {Validator._format_error(e)}"])

        if reread != page:
            for index, (expected, actual) in enumerate(zip(page.fields(), reread.fields())):
                if expected != actual:
                    errors.append(
                        f"[Round-trip] Field {index} ':{expected.get_tag()}:' reads back as "
                        f"{actual!r} instead of {expected!r}"
                    )
                    break
            else:
                errors.append("[Round-trip] Re-read page differs from the rendered page.")

        return ValidationReport(is_valid=not errors, errors=errors)
