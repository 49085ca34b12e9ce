"""Tests for the classification engine."""

from dmascan.classification.engine import Classifier, classify
from dmascan.classification.signatures import SignatureCatalog
from dmascan.core.models import DeviceRecord, MatchField, SignatureCategory


class TestClassify:
    """Tests for the classify function."""

    def test_hardware_id_match(self, kmbox_device, default_catalog):
        """Test a known hardware ID is flagged."""
        result = classify(kmbox_device, default_catalog)

        assert result is not None
        assert result.category_name == "KMBOX-pattern"
        assert result.reason_text == "[$] KMBox pattern detected"
        assert result.matched_field == MatchField.HARDWARE_ID
        assert result.matched_pattern == "VID_1A2C&PID_2124"
        assert result.device is kmbox_device

    def test_description_match(self, default_catalog):
        """Test a match on the description alone."""
        device = DeviceRecord(hardware_ids=("USB\\VID_FFFF&PID_0001",), description="kmBox Net")

        result = classify(device, default_catalog)

        assert result.category_name == "KMBOX-pattern"
        assert result.matched_field == MatchField.DESCRIPTION
        assert result.matched_pattern == "KMBOX"

    def test_benign_device(self, benign_device, default_catalog):
        """Test an ordinary device produces no result."""
        assert classify(benign_device, default_catalog) is None

    def test_empty_device_skipped(self, default_catalog):
        """Test a device without any text never matches."""
        assert classify(DeviceRecord(), default_catalog) is None

    def test_empty_device_with_empty_pattern(self):
        """Test an empty device does not match even a degenerate catalog."""
        catalog = SignatureCatalog([SignatureCategory("All", ("",), "all")])

        assert classify(DeviceRecord(), catalog) is None
        assert classify(DeviceRecord(description="x"), catalog) is None

    def test_first_category_wins(self, default_catalog):
        """Test a device matching two categories is reported under the first."""
        device = DeviceRecord(description="KMBOX FPGA Accelerator")

        result = classify(device, default_catalog)

        assert result.category_name == "KMBOX-pattern"

    def test_category_priority_over_field(self, default_catalog):
        """Test an earlier category on the description beats a later one on the hardware ID."""
        device = DeviceRecord(
            hardware_ids=("PCI\\CC_0880",),
            description="STM32 Bootloader",
        )

        result = classify(device, default_catalog)

        assert result.category_name == "Fuzer-pattern"
        assert result.matched_field == MatchField.DESCRIPTION

    def test_fuzer_hardware_id(self, default_catalog):
        """Test a Fuzer hardware ID is flagged."""
        device = DeviceRecord(hardware_ids=("USB\\VID_0483&PID_5750&REV_0200",))

        assert classify(device, default_catalog).category_name == "Fuzer-pattern"

    def test_generic_dma_class(self, default_catalog):
        """Test the generic PCI class code is flagged."""
        device = DeviceRecord(description="Generic PCI Accelerator, compatible with PCI\\CC_0800")

        result = classify(device, default_catalog)

        assert result.category_name == "DMA-capable"
        assert result.category.description == "generic DMA/PCI class"

    def test_joined_ids_searched(self, default_catalog):
        """Test patterns are found in any of the hardware IDs."""
        device = DeviceRecord(hardware_ids=("ACPI\\PNP0A08", "ROOT\\SYSTEM_PERIPHERAL"))

        assert classify(device, default_catalog).category_name == "DMA-capable"

    def test_accepts_plain_sequence(self):
        """Test any ordered sequence of categories works as a catalog."""
        categories = [SignatureCategory("A", ("FOO",), "a"), SignatureCategory("B", ("FOO",), "b")]

        result = classify(DeviceRecord(description="foo"), categories)

        assert result.category_name == "A"

    def test_empty_catalog(self, kmbox_device):
        """Test nothing matches an empty catalog."""
        assert classify(kmbox_device, SignatureCatalog()) is None


class TestClassifier:
    """Tests for the Classifier class."""

    def test_default_catalog(self):
        """Test the classifier builds the default catalog."""
        classifier = Classifier()

        assert len(classifier.catalog) == 3

    def test_classify(self, kmbox_device, default_catalog):
        """Test classifying through the bound catalog."""
        classifier = Classifier(default_catalog)

        assert classifier.classify(kmbox_device).category_name == "KMBOX-pattern"

    def test_classify_batch_order(self, sample_devices, default_catalog):
        """Test batch results keep input order and drop benign devices."""
        classifier = Classifier(default_catalog)

        results = classifier.classify_batch(sample_devices)

        assert [r.device.description for r in results] == [
            "STMicroelectronics Virtual COM Port",
            "USB Composite Device",
            "Xilinx FPGA Card",
        ]
        assert [r.category_name for r in results] == [
            "Fuzer-pattern",
            "KMBOX-pattern",
            "DMA-capable",
        ]
