from __future__ import annotations

import unittest

from shlib.libname import (
    ConflictingSelectorsError,
    LibraryNameError,
    MetaPattern,
    NoSelectionError,
    PackageDescriptor,
    classify_arguments,
    common_import_prefix,
    derive_library_name,
    is_local_pattern,
)


def packages(*paths: str) -> list[PackageDescriptor]:
    return [PackageDescriptor(import_path=path) for path in paths]


class DeriveLibraryNameTests(unittest.TestCase):
    def test_single_meta_pattern_is_returned_unchanged(self) -> None:
        for pattern in MetaPattern:
            with self.subTest(pattern=pattern.value):
                self.assertEqual(derive_library_name([pattern.value], []), pattern.value)

    def test_multiple_meta_patterns_are_joined_in_order(self) -> None:
        self.assertEqual(derive_library_name(["std", "cmd"], []), "std,cmd")
        self.assertEqual(derive_library_name(["all", "std", "cmd"], []), "all,std,cmd")

    def test_duplicate_meta_patterns_pass_through(self) -> None:
        self.assertEqual(derive_library_name(["std", "std"], []), "std,std")

    def test_meta_patterns_ignore_resolved_packages(self) -> None:
        self.assertEqual(derive_library_name(["std"], packages("fmt", "os")), "std")

    def test_single_package_without_arguments(self) -> None:
        self.assertEqual(derive_library_name([], packages("gopkg.in/somelib")), "gopkg.in-somelib")

    def test_local_wildcard_with_single_package(self) -> None:
        self.assertEqual(derive_library_name(["./..."], packages("somelib")), "somelib")

    def test_repeated_argument_resolving_to_one_package(self) -> None:
        name = derive_library_name(["../somelib", "../somelib"], packages("somelib", "somelib"))
        self.assertEqual(name, "somelib")

    def test_sibling_packages_are_comma_joined(self) -> None:
        name = derive_library_name(["../lib1", "../lib2"], packages("gopkg.in/lib1", "gopkg.in/lib2"))
        self.assertEqual(name, "gopkg.in-lib1,gopkg.in-lib2")

    def test_local_wildcard_uses_common_directory(self) -> None:
        name = derive_library_name(
            ["./..."],
            packages("gopkg.in/dir/lib1", "gopkg.in/lib2", "gopkg.in/lib3"),
        )
        self.assertEqual(name, "gopkg.in")

    def test_local_wildcard_without_common_directory_joins_paths(self) -> None:
        name = derive_library_name(["./..."], packages("alpha/one", "beta/two"))
        self.assertEqual(name, "alpha-one,beta-two")

    def test_non_local_wildcard_names_its_root(self) -> None:
        name = derive_library_name(["example.com/tools/..."], packages("example.com/tools/a", "example.com/tools/b"))
        self.assertEqual(name, "example.com-tools")

    def test_name_never_contains_path_separators(self) -> None:
        name = derive_library_name(["../a", "../b"], packages("x/y/a", "x/z/b"))
        self.assertNotIn("/", name)
        self.assertEqual(name, "x-y-a,x-z-b")

    def test_mixing_meta_and_concrete_patterns_fails(self) -> None:
        for args in (["std", "../lib2"], ["all", "./"], ["cmd", "fmt"], ["fmt", "cmd"]):
            with self.subTest(args=args):
                with self.assertRaises(ConflictingSelectorsError) as ctx:
                    derive_library_name(args, [])
                self.assertIsInstance(ctx.exception, LibraryNameError)
                self.assertIn("mixing of meta and non-meta packages", str(ctx.exception))

    def test_conflict_error_keeps_argument_order(self) -> None:
        with self.assertRaises(ConflictingSelectorsError) as ctx:
            derive_library_name(["fmt", "std", "os", "cmd"], [])
        self.assertEqual(ctx.exception.meta, ["std", "cmd"])
        self.assertEqual(ctx.exception.concrete, ["fmt", "os"])

    def test_nothing_to_name_fails(self) -> None:
        with self.assertRaises(NoSelectionError):
            derive_library_name([], [])
        with self.assertRaises(NoSelectionError):
            derive_library_name(["./..."], [])

    def test_errors_are_value_errors(self) -> None:
        with self.assertRaises(ValueError):
            derive_library_name([], [])


class HelperTests(unittest.TestCase):
    def test_classify_arguments(self) -> None:
        classification = classify_arguments(["std", "./...", "all", "fmt"])
        self.assertEqual(classification.meta, ["std", "all"])
        self.assertEqual(classification.concrete, ["./...", "fmt"])
        self.assertTrue(classification.conflicting)

    def test_common_prefix_compares_whole_segments(self) -> None:
        self.assertEqual(common_import_prefix(["gopkg.in/lib1", "gopkg.in/lib2"]), "gopkg.in")
        self.assertEqual(common_import_prefix(["gopkg.in/dir/lib1", "gopkg.in/lib2"]), "gopkg.in")
        self.assertEqual(common_import_prefix(["a/b/c", "a/b/d"]), "a/b")
        self.assertEqual(common_import_prefix(["lib1", "lib2"]), "")
        self.assertEqual(common_import_prefix(["a/b", "a/b/c"]), "a/b")
        self.assertEqual(common_import_prefix([]), "")

    def test_is_local_pattern(self) -> None:
        self.assertTrue(is_local_pattern("."))
        self.assertTrue(is_local_pattern(".."))
        self.assertTrue(is_local_pattern("./lib"))
        self.assertTrue(is_local_pattern("../lib"))
        self.assertFalse(is_local_pattern("gopkg.in/lib"))
        self.assertFalse(is_local_pattern(".hidden"))

    def test_package_descriptor_from_records(self) -> None:
        self.assertEqual(PackageDescriptor.from_value({"ImportPath": "a/b"}).import_path, "a/b")
        self.assertEqual(PackageDescriptor.from_value({"import_path": "c"}).import_path, "c")
        self.assertEqual(PackageDescriptor.from_value(" d/e ").import_path, "d/e")
        with self.assertRaises(TypeError):
            PackageDescriptor.from_value({"Name": "x"})
        with self.assertRaises(ValueError):
            PackageDescriptor.from_value("  ")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
