"""Unit tests for the voice activity detector."""

import pytest
import numpy as np

from speechpace.audio.vad import VoiceActivityDetector, RmsHistory
from speechpace.models.audio import AudioBuffer, EnergyReading
from speechpace.models.settings import VadSettings


@pytest.mark.unit
class TestRmsHistory:

    def test_evicts_oldest_when_full(self):
        history = RmsHistory(capacity=3)
        for value in [1.0, 2.0, 3.0, 4.0]:
            history.push(value)

        assert len(history) == 3
        assert history.average() == pytest.approx(3.0)

    def test_empty_history_average_is_zero(self):
        assert RmsHistory().average() == 0.0

    def test_rejects_zero_capacity(self):
        with pytest.raises(ValueError):
            RmsHistory(capacity=0)


@pytest.mark.unit
class TestEnergyReading:

    def test_rms_and_peak(self):
        reading = EnergyReading.from_samples(np.array([0.5, -0.5, 0.5, -1.0]))
        assert reading.peak == pytest.approx(1.0)
        assert reading.rms == pytest.approx(np.sqrt((0.25 * 3 + 1.0) / 4))

    def test_empty_samples(self):
        assert EnergyReading.from_samples(np.array([])) == EnergyReading(rms=0.0, peak=0.0)


@pytest.mark.unit
class TestVoiceActivityDetector:

    def test_single_loud_buffer_is_voice(self):
        """RMS 0.09 and peak 0.1 over a one-buffer history classify as voice."""
        samples = np.full(1024, 0.09)
        samples[1::2] *= -1
        samples[0] = 0.1
        buffer = AudioBuffer(samples=samples, sample_rate=16000)

        vad = VoiceActivityDetector()
        result = vad.classify(buffer)

        assert result.is_voice is True
        assert len(vad.history) == 1
        assert vad.last_reading.peak == pytest.approx(0.1)
        assert vad.last_reading.rms == pytest.approx(0.09, abs=1e-3)

    def test_duration_is_frames_over_sample_rate(self, make_buffer):
        result = VoiceActivityDetector().classify(make_buffer("voice", frames=1024, sample_rate=16000))
        assert result.duration == pytest.approx(0.064)

    def test_silence_is_not_voice(self, make_buffer):
        result = VoiceActivityDetector().classify(make_buffer("silence"))
        assert result.is_voice is False

    def test_steady_hum_rejected_by_peak_test(self, make_buffer):
        # RMS ~0.053 clears the energy threshold, peak 0.075 does not
        vad = VoiceActivityDetector()
        buffer = make_buffer("hum", amplitude=0.075)

        result = vad.classify(buffer)

        assert vad.last_average_rms > vad.settings.rms_threshold
        assert result.is_voice is False

    def test_isolated_pop_rejected_by_energy_test(self, make_buffer):
        vad = VoiceActivityDetector()
        result = vad.classify(make_buffer("pop", amplitude=0.9))

        assert vad.last_reading.peak > vad.settings.peak_threshold
        assert result.is_voice is False

    def test_history_carries_voice_through_a_dropout(self, make_buffer):
        vad = VoiceActivityDetector()
        for _ in range(7):
            assert vad.classify(make_buffer("voice", amplitude=0.3)).is_voice

        # Quiet buffer with a spike: its own RMS is low, the average is not
        assert vad.classify(make_buffer("pop", amplitude=0.9)).is_voice is True

    def test_silence_counter_and_pause_flag(self, make_buffer):
        vad = VoiceActivityDetector(VadSettings(silence_frames_required=3))

        for _ in range(3):
            vad.classify(make_buffer("silence"))
        assert vad.silence_frames == 3
        assert vad.in_pause is True

        vad.classify(make_buffer("voice", amplitude=0.3))
        assert vad.silence_frames == 0
        assert vad.in_pause is False

    def test_voice_after_long_silence_waits_for_average(self, make_buffer):
        vad = VoiceActivityDetector(VadSettings(silence_frames_required=1))
        for _ in range(20):
            vad.classify(make_buffer("silence"))

        # One loud buffer against a history of silence stays under the average threshold
        assert vad.classify(make_buffer("voice", amplitude=0.5)).is_voice is False
        assert vad.classify(make_buffer("voice", amplitude=0.5)).is_voice is True

    def test_history_never_exceeds_capacity(self, make_buffer):
        vad = VoiceActivityDetector(VadSettings(rms_history_size=4))
        for _ in range(10):
            vad.classify(make_buffer("voice"))
        assert len(vad.history) == 4

    def test_empty_buffer(self):
        result = VoiceActivityDetector().classify(AudioBuffer(samples=np.array([]), sample_rate=16000))
        assert result.is_voice is False
        assert result.duration == 0.0

    def test_reset_clears_state(self, make_buffer):
        vad = VoiceActivityDetector()
        vad.classify(make_buffer("voice"))
        vad.classify(make_buffer("silence"))

        vad.reset()

        assert len(vad.history) == 0
        assert vad.silence_frames == 0
        assert vad.last_reading is None
