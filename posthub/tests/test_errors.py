import unittest

from posthub.core.errors import (
    ApplicationError,
    BadRequestError,
    ErrorKind,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)


class TestNotFoundError(unittest.TestCase):
    def test_free_text_message(self):
        err = NotFoundError("Post not found!")
        self.assertEqual(err.message, "Post not found!")
        self.assertEqual(err.status_code, 404)
        self.assertEqual(err.error_code, "NOT_FOUND")
        self.assertIsNone(err.additional_data)

    def test_resource_form_formats_message(self):
        err = NotFoundError.for_resource("Post", 123)
        self.assertEqual(err.message, "Post with ID 123 not found")
        self.assertEqual(err.additional_data, {"ResourceType": "Post", "Id": 123})
        self.assertEqual(str(err), "Post with ID 123 not found")


class TestOtherVariants(unittest.TestCase):
    def test_unauthorized_default_message(self):
        err = UnauthorizedError()
        self.assertEqual(err.message, "Unauthorized access")
        self.assertEqual(err.status_code, 403)
        self.assertEqual(err.error_code, "UNAUTHORIZED")

    def test_unauthorized_custom_message(self):
        self.assertEqual(UnauthorizedError("Access denied").message, "Access denied")

    def test_bad_request(self):
        err = BadRequestError("Invalid input")
        self.assertEqual(err.status_code, 400)
        self.assertEqual(err.error_code, "BAD_REQUEST")
        self.assertEqual(err.kind, ErrorKind.BAD_REQUEST)

    def test_validation_error(self):
        errors = {"Email": ["required"], "Password": ["too short", "needs digit"]}
        err = ValidationError(errors)
        self.assertEqual(err.status_code, 422)
        self.assertEqual(err.error_code, "VALIDATION_ERROR")
        self.assertEqual(err.message, "One or more validation errors occurred")
        self.assertEqual(err.validation_errors, errors)
        self.assertEqual(err.additional_data, {"Errors": errors})

    def test_all_variants_are_application_errors(self):
        for err in (
            NotFoundError("x"),
            UnauthorizedError(),
            BadRequestError("x"),
            ValidationError({}),
        ):
            self.assertIsInstance(err, ApplicationError)
            self.assertIsInstance(err, Exception)


class TestTaxonomyIsFixed(unittest.TestCase):
    def test_status_code_is_read_only(self):
        err = BadRequestError("x")
        with self.assertRaises(AttributeError):
            err.status_code = 500

    def test_foreign_subclass_rejected(self):
        with self.assertRaises(TypeError):
            class TeapotError(ApplicationError):  # noqa: F841
                pass

    def test_base_class_cannot_be_raised_directly(self):
        with self.assertRaises(TypeError):
            ApplicationError("no kind")
        self.assertEqual(ValidationError({}).status_code, 422)


if __name__ == "__main__":
    unittest.main()
